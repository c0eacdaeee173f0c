import copy
import logging
from struct import pack, unpack

logger = logging.getLogger(__name__)

BLOCK_SIZE = 64
DIGEST_SIZE = 32
LENGTH_OFFSET = 56

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

H_INIT = (
    0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a,
    0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19,
)

K = (
    0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5, 0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
    0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3, 0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
    0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc, 0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
    0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7, 0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
    0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13, 0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
    0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3, 0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
    0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5, 0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
    0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208, 0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2,
)


class DigestFinalizedError(RuntimeError):
    """Raised when a finalized SHA256 instance is used again without reset()."""


def rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & MASK32


def shr(x: int, n: int) -> int:
    return x >> n


def ch(x: int, y: int, z: int) -> int:
    return (x & y) ^ ((~x) & z)


def maj(x: int, y: int, z: int) -> int:
    return (x & y) ^ (x & z) ^ (y & z)


def big_sigma0(x: int) -> int:
    return rotr(x, 2) ^ rotr(x, 13) ^ rotr(x, 22)


def big_sigma1(x: int) -> int:
    return rotr(x, 6) ^ rotr(x, 11) ^ rotr(x, 25)


def small_sigma0(x: int) -> int:
    return rotr(x, 7) ^ rotr(x, 18) ^ shr(x, 3)


def small_sigma1(x: int) -> int:
    return rotr(x, 17) ^ rotr(x, 19) ^ shr(x, 10)


def compress(state: tuple, block: bytes) -> tuple:
    """Fold one 64-byte block into an 8-word state (FIPS 180-4, 6.2.2).

    Pure: the input state is left untouched and the new state is returned.
    All sums are reduced modulo 2**32.
    """
    assert len(state) == 8
    assert len(block) == BLOCK_SIZE
    w = list(unpack('>16I', block))
    for t in range(16, 64):
        w.append((small_sigma1(w[t - 2]) + w[t - 7] + small_sigma0(w[t - 15]) + w[t - 16]) & MASK32)

    a, b, c, d, e, f, g, h = state
    for t in range(64):
        t1 = (h + big_sigma1(e) + ch(e, f, g) + K[t] + w[t]) & MASK32
        t2 = (big_sigma0(a) + maj(a, b, c)) & MASK32
        h = g
        g = f
        f = e
        e = (d + t1) & MASK32
        d = c
        c = b
        b = a
        a = (t1 + t2) & MASK32

    return tuple((x + y) & MASK32 for x, y in zip(state, (a, b, c, d, e, f, g, h)))


class SHA256:
    """Streaming SHA-256.

    Feed data with update_bytes()/update_string() in chunks of any size, then
    call finish() or finish_hex() exactly once. A finished instance refuses
    further use until reset() is called. digest()/hexdigest() work on a copy
    and leave the instance open for more data.

    Messages longer than 2**64 - 1 bits are not supported: the bit counter
    wraps modulo 2**64, like the FIPS length field.
    """
    name = 'sha256'
    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, data: bytes = b''):
        self.reset()
        if data:
            self.update_bytes(data)

    def reset(self):
        self._h = H_INIT
        self._pending = b''
        self._bit_length = 0
        self._finalized = False

    def _ensure_open(self):
        if self._finalized:
            logger.error("SHA256 instance already finalized, reset() is required before reuse")
            raise DigestFinalizedError("digest already finalized; call reset() before reuse")

    def update_bytes(self, data: bytes):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("data must be bytes")
        self._ensure_open()
        view = memoryview(data)
        if not view.c_contiguous:
            view = memoryview(view.tobytes())
        view = view.cast('B')
        if not view:
            return
        self._bit_length = (self._bit_length + 8 * len(view)) & MASK64

        offset = 0
        if self._pending:
            offset = min(BLOCK_SIZE - len(self._pending), len(view))
            self._pending += view[:offset].tobytes()
            if len(self._pending) < BLOCK_SIZE:
                assert offset == len(view)
                return
            self._process_block(self._pending)
            self._pending = b''

        full_end = offset + (len(view) - offset) // BLOCK_SIZE * BLOCK_SIZE
        for i in range(offset, full_end, BLOCK_SIZE):
            self._process_block(view[i:i + BLOCK_SIZE].tobytes())
        self._pending = view[full_end:].tobytes()

        assert len(self._pending) < BLOCK_SIZE, "pending buffer holds a full block"

    def update_string(self, data: str):
        self.update_bytes(data.encode('utf-8'))

    def update(self, data: bytes):
        self.update_bytes(data)

    def _process_block(self, block: bytes):
        self._h = compress(self._h, block)
        logger.debug(f"Processed block {block.hex()}")

    def _finalize(self):
        tail = self._pending + b'\x80'
        length = pack('>Q', self._bit_length)
        if len(tail) <= LENGTH_OFFSET:
            logger.debug(f"Padding {len(self._pending)} pending bytes into a single final block")
            self._process_block(tail + b'\x00' * (LENGTH_OFFSET - len(tail)) + length)
        else:
            logger.debug(f"Padding {len(self._pending)} pending bytes into two final blocks")
            self._process_block(tail + b'\x00' * (BLOCK_SIZE - len(tail)))
            self._process_block(b'\x00' * LENGTH_OFFSET + length)
        self._pending = b''
        self._finalized = True

    def finish(self) -> bytes:
        self._ensure_open()
        self._finalize()
        return b''.join(pack('>I', word) for word in self._h)

    def finish_hex(self) -> str:
        return ''.join(f'{b:02x}' for b in self.finish())

    def copy(self) -> 'SHA256':
        return copy.deepcopy(self)

    def digest(self) -> bytes:
        return self.copy().finish()

    def hexdigest(self) -> str:
        return self.copy().finish_hex()


def new(data: bytes = b'') -> SHA256:
    return SHA256(data)


def sha256(data: bytes) -> str:
    if isinstance(data, str):
        data = data.encode('utf-8')
    return SHA256(data).finish_hex()
