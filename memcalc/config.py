"""Session policy and driver settings.

The settings can come from a TOML file with a ``[memcalc]`` table::

    [memcalc]
    max_slots = 10
    mutation_updates_previous = true
    banner = false
    farewell = "See you"

Command-line flags are applied on top with :func:`dataclasses.replace`.
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from memcalc.errors import CalcError

CONFIG_TABLE = "memcalc"


class CalcConfigError(CalcError):
    """Raised for an unreadable or invalid configuration file."""


@dataclass(frozen=True)
class CalcConfig:
    # None means the number of memory slots is unbounded
    max_slots: Optional[int] = None
    # whether mem<name>+ / mem<name>- make the new slot value the previous result
    mutation_updates_previous: bool = False
    banner: bool = True
    farewell: str = "Bye!"


DEFAULT_CONFIG = CalcConfig()

BANNER = "Please input calculation formula like 1 + 2, 2 - 1, 3 * 4, 4 / 2"


def _as_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise CalcConfigError(f"Expected {name} to be a boolean.")
    return value


def _as_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise CalcConfigError(f"Expected {name} to be a string.")
    return value


def _as_max_slots(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise CalcConfigError(f"Expected {name} to be an integer.")
    if value < 1:
        raise CalcConfigError(f"Expected {name} to be positive, got {value}.")
    return value


_FIELD_PARSERS = {
    "max_slots": _as_max_slots,
    "mutation_updates_previous": _as_bool,
    "banner": _as_bool,
    "farewell": _as_str,
}


def parse_config(data: dict[str, Any]) -> CalcConfig:
    table = data.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise CalcConfigError(f"Expected [{CONFIG_TABLE}] to be a table.")

    unknown = sorted(set(table) - set(_FIELD_PARSERS))
    if unknown:
        raise CalcConfigError(f"Unknown keys in [{CONFIG_TABLE}]: {', '.join(unknown)}")

    values = {key: _FIELD_PARSERS[key](value, name=f"{CONFIG_TABLE}.{key}") for key, value in table.items()}
    return CalcConfig(**values)


def load_config(path: Path) -> CalcConfig:
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise CalcConfigError(f"Missing config file: {path}") from e
    except OSError as e:
        raise CalcConfigError(f"Failed reading config file: {path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise CalcConfigError(f"Config is not valid UTF-8: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise CalcConfigError(f"Invalid TOML in {path}: {e}") from e

    return parse_config(data)
