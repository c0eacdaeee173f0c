import argparse
import logging

from sha256stream.sha256 import SHA256

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sha256stream",
        description="Print the SHA-256 digest of a string",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sha256stream "hello world"
  sha256stream -v "hello world"    # log every processed block
""")
    parser.add_argument("text", help="string to hash (UTF-8 encoded)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="enable debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')
    logger.debug(f"Hashing {len(args.text)} characters")

    sha = SHA256()
    sha.update_string(args.text)
    print(sha.finish_hex())


if __name__ == "__main__":
    main()
