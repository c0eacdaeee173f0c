import logging

from sha256stream.sha256 import SHA256

logger = logging.getLogger(__name__)

EXPECTED = 'c0535e4be2b79ffd93291305436bf889314e4a3faec05ecffcbb7df31ad9e51a'


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    text = "Hello world!"
    sha = SHA256()
    sha.update_string(text)
    hash_hex = sha.finish_hex()
    print(f'The hash of "{text}" is {hash_hex}')

    if hash_hex == EXPECTED:
        logger.info("Digest matches the published value")
    else:
        logger.error(f"Digest mismatch: expected {EXPECTED}, got {hash_hex}")
    assert hash_hex == EXPECTED

    sha.reset()
    for part in ("Hello", " ", "world", "!"):
        sha.update_string(part)
    assert sha.finish_hex() == EXPECTED
    logger.info("Chunked update produced the same digest")


if __name__ == "__main__":
    main()
