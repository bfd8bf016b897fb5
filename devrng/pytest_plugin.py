"""
pytest integration for devrng.

Registered through the ``pytest11`` entry point. Provides:

- A session seed resolved once from the configured environment variable
  (``DEVRNG_SEED`` by default) and shown in the report header
- ``devrng_session``: session-scoped root generator
- ``devrng``: per-test generator, derived from the session seed and the test
  id (or forked from the root, see ``[tool.devrng] per_test``)
- A ``devrng`` report section with the replay line on failing tests

A malformed seed in the environment aborts the whole session with a usage
error instead of falling back to a fresh seed.
"""

from __future__ import annotations

import logging
import tomllib

import pytest

from devrng.config import DevRngConfig
from devrng.errors import SeedError
from devrng.resolve import announce, resolve_from_env
from devrng.rng import DevRng
from devrng.seed import Seed

logger = logging.getLogger(__name__)

_SETTINGS_KEY = pytest.StashKey[DevRngConfig]()
_SESSION_SEED_KEY = pytest.StashKey[Seed]()
_TEST_SEED_KEY = pytest.StashKey[Seed]()


def pytest_configure(config: pytest.Config) -> None:
    try:
        settings = DevRngConfig.load(config.rootpath)
    except (ValueError, tomllib.TOMLDecodeError) as e:
        raise pytest.UsageError(f"devrng: invalid [tool.devrng] config: {e}") from e

    try:
        # pytest owns stdout here; the seed goes to the report header instead
        seed = resolve_from_env(var=settings.env_var, announce_seed=False)
    except SeedError as e:
        raise pytest.UsageError(f"devrng: {e}") from e

    config.stash[_SETTINGS_KEY] = settings
    config.stash[_SESSION_SEED_KEY] = seed
    logger.debug(f"Session seed {settings.env_var}={seed.hex()}")


def pytest_report_header(config: pytest.Config) -> str | None:
    seed = config.stash.get(_SESSION_SEED_KEY, None)
    if seed is None:
        return None
    return f"devrng: {config.stash[_SETTINGS_KEY].env_var}={seed.hex()}"


@pytest.fixture(scope="session")
def devrng_session(request: pytest.FixtureRequest) -> DevRng:
    """Root generator for the whole session, seeded with the session seed."""
    return DevRng.from_seed(request.config.stash[_SESSION_SEED_KEY])


@pytest.fixture
def devrng(request: pytest.FixtureRequest, devrng_session: DevRng) -> DevRng:
    """Independent generator for the current test."""
    settings = request.config.stash[_SETTINGS_KEY]
    if settings.per_test == "fork":
        rng = devrng_session.fork()
    else:
        rng = devrng_session.derive(request.node.nodeid)

    request.node.stash[_TEST_SEED_KEY] = rng.get_seed()
    if settings.announce:
        announce(devrng_session.get_seed(), prefix=settings.env_var)
    return rng


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]):
    outcome = yield
    report = outcome.get_result()
    if not report.failed:
        return

    test_seed = item.stash.get(_TEST_SEED_KEY, None)
    if test_seed is None:
        return

    settings = item.config.stash[_SETTINGS_KEY]
    session_seed = item.config.stash[_SESSION_SEED_KEY]
    report.sections.append(
        (
            "devrng",
            f"replay with: {settings.env_var}={session_seed.hex()}\n"
            f"test seed: {test_seed.hex()}",
        )
    )
