"""
Seed resolution policy.

Provides:

- seed_from_env: Read an override seed from the environment (thin adapter)
- resolve_seed: Pick the override or draw from OS entropy, then announce it
- resolve_from_env: The two combined, used by ``DevRng()``
- announce: Write the replay line to stdout

The replay line has the form ``DEVRNG_SEED=<64 lowercase hex chars>`` and is
written before any randomness is consumed, so a test that crashes still
reports the seed it ran with. Export the printed line to replay the run:

    DEVRNG_SEED=cab4ab5c... pytest tests/test_flaky.py
"""

from __future__ import annotations

import logging
import os
import secrets
import sys
from typing import Callable, Mapping, TextIO

from devrng.errors import InvalidEncodingError, SeedError
from devrng.seed import Seed

logger = logging.getLogger(__name__)

ENV_VAR = "DEVRNG_SEED"
ANNOUNCE_PREFIX = ENV_VAR


def seed_from_env(
    environ: Mapping[str, str] | None = None,
    var: str = ENV_VAR,
) -> Seed | None:
    """
    Read the override seed from the environment.

    Args:
        environ: Mapping to read from (default: ``os.environ``).
        var: Name of the variable holding the hex seed.

    Returns:
        The decoded Seed, or ``None`` if the variable is unset.

    Raises:
        InvalidEncodingError: If the value is not valid unicode or not hex.
        WrongLengthError: If the value is not 64 hex characters long.
    """
    env = os.environ if environ is None else environ
    value = env.get(var)
    if value is None:
        return None

    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        # os.environ decodes undecodable bytes to lone surrogates
        raise InvalidEncodingError(
            f"provided seed in {var} is not a valid unicode string"
        ) from None

    try:
        return Seed.from_hex(value)
    except SeedError as e:
        raise type(e)(f"provided seed in {var} is not valid: {e}") from e


def announce(
    seed: Seed,
    out: TextIO | None = None,
    prefix: str = ANNOUNCE_PREFIX,
) -> None:
    """Write ``{prefix}={seed hex}`` as one line to *out* (default: stdout)."""
    stream = sys.stdout if out is None else out
    stream.write(f"{prefix}={seed.hex()}\n")
    stream.flush()


def resolve_seed(
    override: Seed | None = None,
    *,
    entropy: Callable[[int], bytes] = secrets.token_bytes,
    announce_seed: bool = True,
    out: TextIO | None = None,
    prefix: str = ANNOUNCE_PREFIX,
) -> Seed:
    """
    Resolve the seed for a fresh generator.

    The override, when given, is used as-is. Otherwise 32 bytes are drawn
    from *entropy*. The resolved seed is announced unless *announce_seed* is
    false.

    Args:
        override: Seed supplied by the caller (e.g. from :func:`seed_from_env`).
        entropy: Source of fresh bytes (default: ``secrets.token_bytes``).
        announce_seed: Whether to write the replay line.
        out: Stream for the replay line (default: stdout).
        prefix: Label written before ``=`` on the replay line.

    Returns:
        The resolved Seed.

    Raises:
        EntropyUnavailableError: If no override is given and entropy fails.
    """
    if override is not None:
        seed = override
        logger.debug("Using override seed")
    else:
        seed = Seed.from_entropy(entropy)
        logger.debug("Drew fresh seed from system entropy")

    if announce_seed:
        announce(seed, out=out, prefix=prefix)
    return seed


def resolve_from_env(
    environ: Mapping[str, str] | None = None,
    var: str = ENV_VAR,
    *,
    entropy: Callable[[int], bytes] = secrets.token_bytes,
    announce_seed: bool = True,
    out: TextIO | None = None,
) -> Seed:
    """
    Resolve a seed from the environment variable *var*, falling back to entropy.

    The replay line uses *var* as its prefix, so it can be pasted back into
    the environment unchanged.
    """
    override = seed_from_env(environ, var=var)
    return resolve_seed(
        override,
        entropy=entropy,
        announce_seed=announce_seed,
        out=out,
        prefix=var,
    )
