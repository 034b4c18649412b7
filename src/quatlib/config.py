"""
===============================================================================
QUATLIB - Numeric Configuration
===============================================================================
Tolerances and display settings, loaded from YAML. The file holds a single
top-level ``numeric`` section:

    numeric:
      slerp_threshold: 0.9995
      unit_tolerance: 1.0e-8
      comparison_tolerance: 1.0e-9
      precision: 6

Any key may be omitted; missing keys keep the defaults from core.constants.
===============================================================================
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from quatlib.core.constants import (
    COMPARISON_TOLERANCE, DEFAULT_PRECISION, SLERP_LINEAR_THRESHOLD,
    UNIT_TOLERANCE
)


logger = logging.getLogger(__name__)


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _as_int(name: str, value: Any) -> int:
    # 6.0 is accepted, 6.5 is not.
    number = _as_float(name, value)
    if not number.is_integer():
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return int(number)


@dataclass(frozen=True)
class NumericConfig:
    """
    Numeric settings shared by the command-line front end.

    Attributes
    ----------
    slerp_threshold : float
        Cosine above which slerp falls back to linear interpolation.
        Must lie in (0, 1].
    unit_tolerance : float
        Allowed deviation of |q| from 1 in is_unit().
    comparison_tolerance : float
        Absolute tolerance for Quaternion.isclose().
    precision : int
        Decimal places when printing results.
    """
    slerp_threshold: float = SLERP_LINEAR_THRESHOLD
    unit_tolerance: float = UNIT_TOLERANCE
    comparison_tolerance: float = COMPARISON_TOLERANCE
    precision: int = DEFAULT_PRECISION

    def __post_init__(self) -> None:
        if not 0.0 < self.slerp_threshold <= 1.0:
            raise ValueError(
                f"slerp_threshold must lie in (0, 1], got {self.slerp_threshold}"
            )
        if self.unit_tolerance <= 0.0 or self.comparison_tolerance <= 0.0:
            raise ValueError("Tolerances must be positive")
        if self.precision < 0:
            raise ValueError(f"precision must be >= 0, got {self.precision}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'NumericConfig':
        """
        Build a config from a mapping, rejecting unknown keys.

        Raises
        ------
        ValueError
            On unknown keys or out-of-range values.
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown numeric config keys: {', '.join(unknown)}")

        kwargs = {}
        for f in fields(cls):
            if f.name in data:
                cast = _as_int if f.type is int else _as_float
                kwargs[f.name] = cast(f.name, data[f.name])
        return cls(**kwargs)


def load_config(config_path: Union[str, Path]) -> NumericConfig:
    """
    Load numeric settings from a YAML file.

    Args:
        config_path: Path to a YAML file with a ``numeric`` section.

    Returns:
        NumericConfig with file values over the defaults.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid YAML, the document is not a
            mapping, or it holds invalid values.
    """
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info(f"Loading configuration from: {path}")
    with open(path, 'r') as f:
        try:
            document = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(document, dict):
        raise ValueError(f"Config root must be a mapping, got {type(document).__name__}")
    section = document.get('numeric', {})
    if not isinstance(section, dict):
        raise ValueError("'numeric' section must be a mapping")

    config = NumericConfig.from_dict(section)
    logger.debug(f"Numeric config: {config}")
    return config
