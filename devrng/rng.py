"""
DevRng: reproducible random generator for tests.

A DevRng provides:
- A seed taken from ``DEVRNG_SEED`` or fresh OS entropy, printed on creation
- A deterministic ChaCha20 byte stream (``next_u32``, ``next_u64``,
  ``fill_bytes``)
- The full ``random.Random`` API on top of that stream
- Forking and named derivation of independent child generators

Example:
    from devrng import DevRng

    rng = DevRng()              # prints DEVRNG_SEED=...
    n = rng.randint(0, 10)
    worker_rngs = [rng.fork() for _ in range(4)]

Generators are ordinary mutable state and are not safe for concurrent use.
Fork one child per worker before starting the workers instead.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Mapping, Protocol, runtime_checkable

from devrng.resolve import ENV_VAR, resolve_from_env
from devrng.seed import SEED_LEN, Seed
from devrng.stream import ChaChaKeystream

logger = logging.getLogger(__name__)

STATE_VERSION = "devrng-1"

_RECIP_BPF = 2.0**-53


@runtime_checkable
class ByteSource(Protocol):
    """
    Protocol for upstream randomness sources usable with :meth:`DevRng.from_rng`.

    ``random.Random`` instances and NumPy generators are accepted as well,
    through their ``randbytes`` and ``bytes`` methods.
    """

    def fill_bytes(self, n: int) -> bytes:
        """Return *n* random bytes."""
        ...


@runtime_checkable
class SeedableRng(ByteSource, Protocol):
    """
    Protocol for seeded, forkable generators such as :class:`DevRng`.

    ``cryptographic`` is true when the byte stream comes from a
    cryptographic primitive rather than a statistical PRNG.
    """

    cryptographic: bool

    def get_seed(self) -> Seed:
        """Return the seed that determines the stream."""
        ...

    def fork(self) -> SeedableRng:
        """Return an independent generator seeded from this stream."""
        ...


def _coerce_seed(value: Any) -> Seed:
    """Turn an explicit seed argument into a Seed."""
    if isinstance(value, Seed):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Seed(bytes(value))
    if isinstance(value, int):
        return Seed.from_u64(value)
    if isinstance(value, str):
        return Seed.from_hex(value)
    raise TypeError(
        f"cannot seed DevRng from {type(value).__name__}; "
        "expected Seed, 32 bytes, a u64 int or a 64-char hex string"
    )


class DevRng(random.Random):
    """
    Reproducible random generator for tests.

    ``DevRng()`` reads the seed from ``DEVRNG_SEED`` (or draws one from OS
    entropy when unset) and prints ``DEVRNG_SEED=<hex>`` to stdout. Passing a
    seed explicitly skips both the environment and the printout.

    Args:
        seed: ``None`` for environment/entropy seeding, or an explicit
            :class:`Seed`, 32 bytes, a u64 integer or a 64-char hex string.

    Raises:
        SeedError: If the environment holds a malformed seed or entropy is
            unavailable.
    """

    cryptographic = True

    def __init__(self, seed: Seed | bytes | int | str | None = None) -> None:
        self._stream: ChaChaKeystream | None = None
        super().__init__(seed)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def seed(self, a: Any = None, version: int = 2) -> None:
        """
        Re-seed the generator.

        ``None`` re-runs environment/entropy resolution (and prints the seed).
        Integers are expanded with :meth:`Seed.from_u64`, strings decoded with
        :meth:`Seed.from_hex`. *version* is accepted for ``random.Random``
        compatibility and ignored.
        """
        resolved = resolve_from_env() if a is None else _coerce_seed(a)
        self._stream = ChaChaKeystream(resolved)
        self.gauss_next = None
        logger.debug(f"Seeded DevRng with {resolved.hex()[:16]}...")

    @classmethod
    def from_seed(cls, seed: Seed | bytes) -> DevRng:
        """Create a generator from an explicit 32-byte seed (no env, no output)."""
        return cls(_coerce_seed(seed))

    @classmethod
    def seed_from_u64(cls, state: int) -> DevRng:
        """Create a generator from a 64-bit integer expanded into a full seed."""
        return cls(Seed.from_u64(state))

    @classmethod
    def from_entropy(cls) -> DevRng:
        """Create a generator from fresh OS entropy, ignoring the environment."""
        return cls(Seed.from_entropy())

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        var: str = ENV_VAR,
        **kwargs: Any,
    ) -> DevRng:
        """
        Create a generator seeded from *environ* (default: ``os.environ``).

        Keyword arguments are passed to :func:`devrng.resolve.resolve_from_env`
        (``entropy``, ``announce_seed``, ``out``).
        """
        return cls(resolve_from_env(environ, var, **kwargs))

    @classmethod
    def from_rng(cls, source: Any) -> DevRng:
        """
        Create a generator seeded with 32 bytes taken from *source*.

        *source* may implement :class:`ByteSource`, be a ``random.Random``
        (including another DevRng or ``random.SystemRandom``), or be a NumPy
        ``Generator``. Errors raised by the source propagate unchanged.

        Raises:
            TypeError: If *source* offers no way to produce bytes.
        """
        if isinstance(source, ByteSource):
            data = source.fill_bytes(SEED_LEN)
        elif isinstance(source, random.Random):
            data = source.randbytes(SEED_LEN)
        elif callable(getattr(source, "bytes", None)):
            data = source.bytes(SEED_LEN)
        else:
            raise TypeError(
                f"cannot draw seed bytes from {type(source).__name__}"
            )
        return cls(Seed(data))

    # ------------------------------------------------------------------
    # Byte stream
    # ------------------------------------------------------------------

    def next_u32(self) -> int:
        """Return the next 4 stream bytes as a little-endian unsigned int."""
        return int.from_bytes(self._stream.read(4), "little")

    def next_u64(self) -> int:
        """Return the next 8 stream bytes as a little-endian unsigned int."""
        return int.from_bytes(self._stream.read(8), "little")

    def fill_bytes(self, n: int) -> bytes:
        """Return the next *n* stream bytes."""
        return self._stream.read(n)

    def fill_into(self, buffer: Any) -> None:
        """Overwrite every byte of the writable *buffer* with stream bytes."""
        view = memoryview(buffer).cast("B")
        view[:] = self._stream.read(view.nbytes)

    def randbytes(self, n: int) -> bytes:
        return self._stream.read(n)

    def getrandbits(self, k: int) -> int:
        if k < 0:
            raise ValueError("number of bits must be non-negative")
        if k == 0:
            return 0
        value = int.from_bytes(self._stream.read((k + 7) // 8), "little")
        return value & ((1 << k) - 1)

    def random(self) -> float:
        """Return a float in [0.0, 1.0) built from the top 53 bits of a u64."""
        return (self.next_u64() >> 11) * _RECIP_BPF

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def fork(self) -> DevRng:
        """
        Derive an independent generator from this one.

        Consumes 32 bytes of this generator's stream and uses them as the
        child's seed. Forking at the same stream position always yields the
        same child.
        """
        child = type(self).from_seed(self._stream.read(SEED_LEN))
        logger.debug(f"Forked DevRng {child.get_seed().hex()[:16]}...")
        return child

    def derive(self, name: str) -> DevRng:
        """
        Derive a named child generator without touching this stream.

        The child's seed depends only on this generator's seed and *name*,
        not on how much of the stream has been consumed.
        """
        return type(self).from_seed(self.get_seed().derive(name))

    def numpy(self) -> Any:
        """
        Fork a NumPy Generator from this stream.

        Consumes 32 bytes, like :meth:`fork`. Requires numpy to be installed
        (optional dependency).

        Returns:
            A seeded numpy.random.Generator instance.

        Raises:
            ImportError: If numpy is not installed.
        """
        try:
            import numpy as np
        except ImportError as e:
            raise ImportError(
                "numpy is required for DevRng.numpy(). "
                "Install it with: pip install devrng[numpy]"
            ) from e

        entropy = int.from_bytes(self._stream.read(SEED_LEN), "little")
        return np.random.default_rng(np.random.SeedSequence(entropy))

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def get_seed(self) -> Seed:
        """Return the seed this generator was created with."""
        return self._stream.seed

    @property
    def position(self) -> int:
        """Number of stream bytes consumed since seeding."""
        return self._stream.position

    def getstate(self) -> tuple[Any, ...]:
        """Return ``(version, seed bytes, position, gauss_next)``."""
        stream = self._stream
        return (STATE_VERSION, stream.seed.data, stream.position, self.gauss_next)

    def setstate(self, state: tuple[Any, ...]) -> None:
        """Restore a state produced by :meth:`getstate`."""
        version = state[0] if isinstance(state, tuple) and len(state) == 4 else None
        if version != STATE_VERSION:
            raise ValueError(
                f"state with version {version!r} passed to DevRng.setstate() "
                f"of version {STATE_VERSION!r}"
            )
        _, seed, position, gauss_next = state
        self._stream = ChaChaKeystream(Seed(seed), position)
        self.gauss_next = gauss_next

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self._stream.seed,), self.getstate()

    def __repr__(self) -> str:
        stream = self._stream
        return f"DevRng(seed={stream.seed.hex()!r}, position={stream.position})"
