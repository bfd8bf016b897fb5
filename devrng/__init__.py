"""
devrng: Reproducible randomness for test suites.

Randomized tests are hard to debug when their failures depend on random state
nobody recorded. A DevRng is a deterministic ChaCha20-based generator whose
seed is read from ``DEVRNG_SEED`` (to replay a run) or drawn from OS entropy
(normal runs), and always printed, so a failing run can be replayed exactly.

Example:
    from devrng import DevRng

    def test_sort_is_stable():
        rng = DevRng()          # prints DEVRNG_SEED=<64 hex chars>
        items = [rng.randint(0, 5) for _ in range(100)]
        ...

    # Replay a failure:
    #   DEVRNG_SEED=<printed hex> pytest -k test_sort_is_stable

With pytest, the ``devrng`` fixture provides a per-test generator derived from
one session seed shown in the report header.
"""

__version__ = "0.1.0"

from devrng.config import DevRngConfig
from devrng.errors import (
    EntropyUnavailableError,
    InvalidEncodingError,
    SeedError,
    WrongLengthError,
)
from devrng.resolve import (
    ENV_VAR,
    announce,
    resolve_from_env,
    resolve_seed,
    seed_from_env,
)
from devrng.rng import ByteSource, DevRng, SeedableRng
from devrng.seed import SEED_LEN, Seed
from devrng.stream import ChaChaKeystream

__all__ = [
    "__version__",
    # Generator
    "DevRng",
    "ByteSource",
    "SeedableRng",
    "ChaChaKeystream",
    # Seeds
    "Seed",
    "SEED_LEN",
    "ENV_VAR",
    "announce",
    "resolve_seed",
    "resolve_from_env",
    "seed_from_env",
    # Config
    "DevRngConfig",
    # Errors
    "SeedError",
    "WrongLengthError",
    "InvalidEncodingError",
    "EntropyUnavailableError",
]
