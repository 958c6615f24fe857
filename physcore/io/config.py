"""Plain-text configuration loader for molecular dynamics parameters.

The format is one ``key = value`` pair per line; blank lines and lines
starting with ``#`` are ignored. Values are SI units::

    # 1 ps of argon at 2 fs
    dt = 2e-15
    end_time = 1e-12
    use_neighbor_list = yes
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..models import SimulationParams

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes"}
_FALSE = {"0", "false", "no"}


class ConfigError(RuntimeError):
    """Raised by load_config_or_raise when a config cannot be loaded."""


def _parse_float(value: str) -> float:
    return float(value)


def _parse_count(value: str) -> int:
    count = int(value)
    if count < 0:
        raise ValueError(f"negative count {count}")
    return count


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


_PARSERS: dict[str, Callable[[str], Any]] = {
    "dt": _parse_float,
    "dx": _parse_float,
    "end_time": _parse_float,
    "max_steps": _parse_count,
    "temperature": _parse_float,
    "cutoff": _parse_float,
    "neighbor_skin": _parse_float,
    "use_neighbor_list": _parse_bool,
    "zero_com_velocity": _parse_bool,
}


@dataclass(frozen=True)
class ConfigResult:
    """
    Outcome of loading a configuration.

    Attributes:
        ok: True if params holds a validated parameter set.
        params: Loaded parameters (defaults on failure).
        error: Failure description, empty on success.
    """

    ok: bool
    params: SimulationParams = field(default_factory=SimulationParams)
    error: str = ""

    @classmethod
    def success(cls, params: SimulationParams) -> ConfigResult:
        return cls(ok=True, params=params)

    @classmethod
    def failure(cls, message: str) -> ConfigResult:
        return cls(ok=False, error=message)


def _failure(message: str) -> ConfigResult:
    logger.warning("Config load failed: %s", message)
    return ConfigResult.failure(message)


def load_config(path: str | Path | None) -> ConfigResult:
    """
    Load simulation parameters from a key=value file.

    Args:
        path: Config file path. An empty path or None means "use defaults".

    Returns:
        ConfigResult with validated parameters or a descriptive error.
    """
    if path is None or str(path) == "":
        return ConfigResult.success(SimulationParams())

    path = Path(path)
    try:
        text = path.read_text()
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Reading %s failed: %s", path, exc)
        return _failure(f"Cannot open config file: {path}")

    values: dict[str, Any] = {}
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            return _failure(f"Invalid line {line_no}: missing '='")

        key, value = (part.strip() for part in line.split("=", 1))
        if not key:
            return _failure(f"Invalid line {line_no}: empty key")

        parser = _PARSERS.get(key)
        if parser is None:
            return _failure(f"Line {line_no}: unknown key '{key}'")
        try:
            values[key] = parser(value)
        except ValueError:
            return _failure(f"Line {line_no}: invalid {key} value")

    params = dataclasses.replace(SimulationParams(), **values)
    error = params.validate()
    if error is not None:
        return _failure(f"Config validation failed: {error}")

    logger.debug("Loaded config from %s: %s", path, params)
    return ConfigResult.success(params)


def load_config_or_raise(path: str | Path | None) -> SimulationParams:
    """
    Load simulation parameters, raising on failure.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    result = load_config(path)
    if not result.ok:
        raise ConfigError(result.error)
    return result.params
