"""
Counter-mode keystream keyed by a seed.

The keystream is ChaCha20 (RFC 8439) from the ``cryptography`` package with
the seed as key, an all-zero nonce and the block counter starting at zero.
Encrypting zero bytes yields the raw keystream, so the output is a pure
function of the seed and the number of bytes already consumed.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from devrng.seed import Seed

BLOCK_LEN = 64
MAX_BLOCKS = 1 << 32
_NONCE = bytes(12)


class ChaChaKeystream:
    """
    Seekable ChaCha20 keystream.

    Example:
        stream = ChaChaKeystream(Seed(bytes(32)))
        first = stream.read(16)
        stream.seek(0)
        assert stream.read(16) == first
    """

    def __init__(self, seed: Seed, position: int = 0) -> None:
        self._seed = seed
        self._position = 0
        self._encryptor = None
        self.seek(position)

    @property
    def seed(self) -> Seed:
        """The seed keying this stream."""
        return self._seed

    @property
    def position(self) -> int:
        """Number of keystream bytes consumed so far."""
        return self._position

    def seek(self, position: int) -> None:
        """
        Reposition the stream at byte offset *position*.

        Raises:
            ValueError: If *position* is negative.
            OverflowError: If *position* lies beyond the 32-bit block counter.
        """
        if position < 0:
            raise ValueError(f"stream position must be non-negative, got {position}")
        block, skip = divmod(position, BLOCK_LEN)
        if block >= MAX_BLOCKS:
            raise OverflowError(f"stream position {position} beyond keystream period")

        nonce = block.to_bytes(4, "little") + _NONCE
        cipher = Cipher(algorithms.ChaCha20(self._seed.data, nonce), mode=None)
        self._encryptor = cipher.encryptor()
        if skip:
            self._encryptor.update(bytes(skip))
        self._position = position

    def read(self, n: int) -> bytes:
        """Return the next *n* keystream bytes."""
        if n < 0:
            raise ValueError(f"cannot read a negative number of bytes: {n}")
        if n == 0:
            return b""
        self._position += n
        return self._encryptor.update(bytes(n))

    def __repr__(self) -> str:
        return f"ChaChaKeystream(seed={self._seed.hex()!r}, position={self._position})"
