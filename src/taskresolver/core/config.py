"""Resolver configuration.

Defaults for ``Resolver.resolve()`` options. Values resolve with priority
argument > environment > default. An optional ``.env`` file is loaded with
python-dotenv before the environment is read.

Environment Variables:
    TASKRESOLVER_WITH_LOADING_STATE: Emit a loading marker by default (true/false)
    TASKRESOLVER_MAX_ITERATIONS: Wave ceiling for a resolution (positive int)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

DEFAULT_MAX_ITERATIONS = 100

ENV_WITH_LOADING_STATE = "TASKRESOLVER_WITH_LOADING_STATE"
ENV_MAX_ITERATIONS = "TASKRESOLVER_MAX_ITERATIONS"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def validate_max_iterations(value: Any) -> int:
    """Validate a wave ceiling.

    Args:
        value: Candidate ceiling.

    Returns:
        The ceiling as int.

    Raises:
        ValueError: If value is not a positive int.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"max_iterations must be an int, got {type(value).__name__}")
    if value <= 0:
        raise ValueError(f"max_iterations must be > 0, got {value}")
    return value


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (true/false), got {raw!r}")


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class ResolverConfig:
    """Default options for resolutions.

    Attributes:
        with_loading_state: Emit a loading marker before the terminal result.
        max_iterations: Maximum number of waves a resolution may need.
    """

    with_loading_state: bool = False
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not isinstance(self.with_loading_state, bool):
            raise ValueError("with_loading_state must be a bool")
        validate_max_iterations(self.max_iterations)

    @classmethod
    def from_env(
        cls,
        env_file: str | Path | None = None,
        with_loading_state: bool | None = None,
        max_iterations: int | None = None,
    ) -> ResolverConfig:
        """Build a config from arguments, environment and defaults.

        Args:
            env_file: Optional .env file to load first. Existing environment
                variables are not overridden by the file.
            with_loading_state: Explicit value, wins over the environment.
            max_iterations: Explicit value, wins over the environment.

        Returns:
            Resolved configuration.

        Raises:
            ValueError: If an environment value cannot be parsed.
        """
        if env_file is not None:
            load_dotenv(env_file)

        if with_loading_state is None:
            raw = os.environ.get(ENV_WITH_LOADING_STATE)
            with_loading_state = (
                _parse_bool(ENV_WITH_LOADING_STATE, raw) if raw else cls.with_loading_state
            )

        if max_iterations is None:
            raw = os.environ.get(ENV_MAX_ITERATIONS)
            max_iterations = _parse_int(ENV_MAX_ITERATIONS, raw) if raw else cls.max_iterations

        return cls(with_loading_state=with_loading_state, max_iterations=max_iterations)
