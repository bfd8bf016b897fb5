"""
Seed: the 32-byte value that fully determines a generator's output.

A Seed provides:
- Strict validation (exactly 32 bytes)
- A case-insensitive 64-character hex codec for the environment variable
- Expansion of a 64-bit integer into a full seed
- Drawing a fresh seed from the OS entropy source
- Deterministic named derivation via sha256
"""

from __future__ import annotations

import hashlib
import secrets
import string
from dataclasses import dataclass
from typing import Callable

from devrng.errors import EntropyUnavailableError, InvalidEncodingError, WrongLengthError

SEED_LEN = 32
HEX_LEN = 2 * SEED_LEN

_HEX_DIGITS = frozenset(string.hexdigits)

# PCG32 constants used to expand a 64-bit integer into a seed
_PCG_MUL = 6364136223846793005
_PCG_INC = 11634580027462260723
_MASK64 = (1 << 64) - 1
_MASK32 = (1 << 32) - 1


@dataclass(frozen=True)
class Seed:
    """
    Exactly 32 bytes of seed material.

    Attributes:
        data: The raw seed bytes.

    Example:
        seed = Seed.from_hex("00" * 32)
        assert seed.hex() == "00" * 32
    """

    data: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        if len(self.data) != SEED_LEN:
            raise WrongLengthError(
                f"seed must be exactly {SEED_LEN} bytes, got {len(self.data)}"
            )

    def __bytes__(self) -> bytes:
        return self.data

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"Seed({self.hex()!r})"

    def hex(self) -> str:
        """Return the 64-character lowercase hex encoding."""
        return self.data.hex()

    def derive(self, name: str) -> Seed:
        """
        Derive a sub-seed deterministically from this seed and *name*.

        Uses SHA-256 for cross-platform stability.

        Args:
            name: A unique name for the sub-seed (e.g., a test node id).

        Returns:
            A new Seed; the same (seed, name) pair always gives the same result.
        """
        h = hashlib.sha256(self.data + b":" + name.encode("utf-8"))
        return Seed(h.digest())

    @classmethod
    def from_hex(cls, text: str) -> Seed:
        """
        Decode a seed from its hex encoding.

        Case is not significant. Surrounding whitespace is not stripped and
        counts towards the length.

        Args:
            text: 64 hexadecimal characters.

        Returns:
            The decoded Seed.

        Raises:
            WrongLengthError: If *text* is not exactly 64 characters long.
            InvalidEncodingError: If *text* contains non-hex characters.
        """
        if len(text) != HEX_LEN:
            raise WrongLengthError(
                f"seed {text!r} must be {HEX_LEN} hex characters, got {len(text)}"
            )
        bad = sorted(set(text) - _HEX_DIGITS)
        if bad:
            raise InvalidEncodingError(
                f"seed {text!r} contains non-hex characters: {''.join(bad)!r}"
            )
        return cls(bytes.fromhex(text))

    @classmethod
    def from_u64(cls, state: int) -> Seed:
        """
        Expand a 64-bit integer into a full seed.

        Each 4-byte word is one PCG32 step, written little-endian. Intended
        for quick throwaway determinism, not for the reported seed path.

        Raises:
            ValueError: If *state* is outside ``[0, 2**64)``.
        """
        if not 0 <= state <= _MASK64:
            raise ValueError(f"u64 seed out of range: {state}")
        out = bytearray()
        for _ in range(SEED_LEN // 4):
            state = (state * _PCG_MUL + _PCG_INC) & _MASK64
            xorshifted = (((state >> 18) ^ state) >> 27) & _MASK32
            rot = state >> 59
            word = ((xorshifted >> rot) | (xorshifted << (-rot & 31))) & _MASK32
            out += word.to_bytes(4, "little")
        return cls(bytes(out))

    @classmethod
    def from_entropy(
        cls, entropy: Callable[[int], bytes] = secrets.token_bytes
    ) -> Seed:
        """
        Draw a fresh seed from the OS entropy source.

        Args:
            entropy: Callable returning *n* random bytes (default:
                ``secrets.token_bytes``).

        Raises:
            EntropyUnavailableError: If the entropy source fails.
        """
        try:
            data = entropy(SEED_LEN)
        except (OSError, NotImplementedError) as e:
            raise EntropyUnavailableError(f"system randomness unavailable: {e}") from e
        return cls(data)
