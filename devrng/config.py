"""
DevRngConfig: Project-level configuration for devrng.

This module provides:

- find_config_file: Walk up directories to locate ``pyproject.toml``
- DevRngConfig: Typed settings from the ``[tool.devrng]`` table

Example ``pyproject.toml``::

    [tool.devrng]
    env_var = "MYPROJECT_TESTS_SEED"
    per_test = "fork"

All keys are optional. A missing file or table yields the defaults.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from devrng.resolve import ENV_VAR

CONFIG_FILENAME = "pyproject.toml"
PER_TEST_MODES = ("derive", "fork")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """
    Walk up from *start_dir* to find ``pyproject.toml``.

    Args:
        start_dir: Directory to start searching from. Defaults to ``Path.cwd()``.

    Returns:
        Path to the config file, or ``None`` if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


@dataclass(frozen=True)
class DevRngConfig:
    """
    Settings from the ``[tool.devrng]`` table.

    Attributes:
        env_var: Environment variable holding the override seed. Also used
            as the label of the printed replay line.
        announce: Whether fresh generators print the replay line.
        per_test: How the pytest plugin builds per-test generators:
            ``"derive"`` (from the session seed and the test id, stable under
            test selection) or ``"fork"`` (forked from the session generator
            in run order).
    """

    env_var: str = ENV_VAR
    announce: bool = True
    per_test: str = "derive"

    def __post_init__(self) -> None:
        if self.per_test not in PER_TEST_MODES:
            raise ValueError(
                f"Unknown per_test mode {self.per_test!r}. "
                f"Expected one of: {', '.join(PER_TEST_MODES)}"
            )
        if not isinstance(self.env_var, str) or not self.env_var:
            raise ValueError(
                f"env_var must be a non-empty string, got {self.env_var!r}"
            )
        if not isinstance(self.announce, bool):
            raise ValueError(
                f"announce must be true or false, got {self.announce!r}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DevRngConfig:
        """
        Create a config from the parsed ``[tool.devrng]`` table.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown [tool.devrng] keys: {', '.join(unknown)}. "
                f"Available keys: {', '.join(sorted(known))}"
            )
        return cls(**data)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> DevRngConfig:
        """
        Find ``pyproject.toml`` above *start_dir* and read ``[tool.devrng]``.

        Args:
            start_dir: Directory to start searching from (default: cwd).

        Returns:
            The loaded config, or the defaults if nothing is configured.
        """
        config_path = find_config_file(start_dir)
        if config_path is None:
            return cls()

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls.from_dict(data.get("tool", {}).get("devrng", {}))
