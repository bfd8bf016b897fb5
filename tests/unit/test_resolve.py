"""Tests for seed resolution."""

from __future__ import annotations

import io

import pytest

from devrng.errors import EntropyUnavailableError, InvalidEncodingError, WrongLengthError
from devrng.resolve import (
    ENV_VAR,
    announce,
    resolve_from_env,
    resolve_seed,
    seed_from_env,
)
from devrng.seed import Seed

HEX = "cab4ab5c8471fa03691bb86d96c2febeb9b1099a78d164e8addbe7f83d107c78"


def _fixed_entropy(n: int) -> bytes:
    return b"\x11" * n


class TestSeedFromEnv:
    """Tests for the environment adapter."""

    def test_unset_returns_none(self):
        assert seed_from_env({}) is None

    def test_valid_value(self):
        assert seed_from_env({ENV_VAR: HEX}) == Seed.from_hex(HEX)

    def test_custom_variable(self):
        env = {"MY_SEED": HEX, ENV_VAR: "0" * 64}
        assert seed_from_env(env, var="MY_SEED") == Seed.from_hex(HEX)

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv(ENV_VAR, HEX)
        assert seed_from_env() == Seed.from_hex(HEX)

    def test_wrong_length_names_value(self):
        with pytest.raises(WrongLengthError, match=ENV_VAR) as info:
            seed_from_env({ENV_VAR: HEX[:63]})
        assert HEX[:63] in str(info.value)

    def test_invalid_hex(self):
        with pytest.raises(InvalidEncodingError, match="not valid"):
            seed_from_env({ENV_VAR: "g" * 64})

    def test_not_unicode(self):
        # What os.environ holds for a value that was not valid UTF-8
        with pytest.raises(InvalidEncodingError, match="unicode"):
            seed_from_env({ENV_VAR: "\udcff" * 64})

    def test_empty_value_is_not_unset(self):
        with pytest.raises(WrongLengthError):
            seed_from_env({ENV_VAR: ""})


class TestAnnounce:
    """Tests for the replay line."""

    def test_format(self):
        out = io.StringIO()
        announce(Seed.from_hex(HEX.upper()), out=out)
        assert out.getvalue() == f"{ENV_VAR}={HEX}\n"

    def test_custom_prefix(self):
        out = io.StringIO()
        announce(Seed.from_hex(HEX), out=out, prefix="SEED")
        assert out.getvalue() == f"SEED={HEX}\n"

    def test_defaults_to_stdout(self, capsys):
        announce(Seed.from_hex(HEX))
        assert capsys.readouterr().out == f"{ENV_VAR}={HEX}\n"


class TestResolveSeed:
    """Tests for resolve_seed()."""

    def test_override_wins(self):
        out = io.StringIO()
        seed = resolve_seed(Seed.from_hex(HEX), entropy=_fixed_entropy, out=out)
        assert seed == Seed.from_hex(HEX)
        assert out.getvalue() == f"{ENV_VAR}={HEX}\n"

    def test_entropy_fallback(self):
        out = io.StringIO()
        seed = resolve_seed(entropy=_fixed_entropy, out=out)
        assert seed.data == b"\x11" * 32
        assert out.getvalue() == f"{ENV_VAR}={'11' * 32}\n"

    def test_no_announce(self):
        out = io.StringIO()
        resolve_seed(entropy=_fixed_entropy, announce_seed=False, out=out)
        assert out.getvalue() == ""

    def test_entropy_failure_is_fatal(self):
        def broken(n):
            raise OSError("no entropy")

        out = io.StringIO()
        with pytest.raises(EntropyUnavailableError):
            resolve_seed(entropy=broken, out=out)
        assert out.getvalue() == ""

    def test_override_skips_entropy(self):
        def broken(n):
            raise AssertionError("entropy should not be read")

        resolve_seed(Seed.from_hex(HEX), entropy=broken, announce_seed=False)


class TestResolveFromEnv:
    """Tests for resolve_from_env()."""

    def test_uses_environment(self):
        out = io.StringIO()
        seed = resolve_from_env({ENV_VAR: HEX}, out=out)
        assert seed == Seed.from_hex(HEX)
        assert out.getvalue() == f"{ENV_VAR}={HEX}\n"

    def test_falls_back_to_entropy(self):
        out = io.StringIO()
        seed = resolve_from_env({}, entropy=_fixed_entropy, out=out)
        assert seed.data == b"\x11" * 32

    def test_prefix_follows_variable(self):
        out = io.StringIO()
        resolve_from_env({"MY_SEED": HEX}, var="MY_SEED", out=out)
        assert out.getvalue() == f"MY_SEED={HEX}\n"

    def test_malformed_does_not_fall_back(self):
        def broken(n):
            raise AssertionError("must not fall back to entropy")

        out = io.StringIO()
        with pytest.raises(WrongLengthError):
            resolve_from_env({ENV_VAR: "abc"}, entropy=broken, out=out)
        assert out.getvalue() == ""
