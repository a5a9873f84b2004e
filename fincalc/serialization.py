"""
Serialization module for fincalc results.

Purpose
-------
Turns calculator results into JSON-ready structures so they can be saved,
diffed and shared, and reads asset lists back through validated configs.

Supports serialization of:
- Any frozen result dataclass (BondResult, OptionResult, FrontierResult, ...)
- numpy arrays and scalars (e.g. SimulationResult.values)
- pandas DataFrames (e.g. the mortality table)

Example
-------
>>> from pathlib import Path
>>> from fincalc.bonds import price_bond
>>> from fincalc.serialization import save_result, to_dict
>>>
>>> result = price_bond(1000, 5, 10, 5, 2)
>>> to_dict(result)["premium"]
False
>>> save_result(result, Path("bond.json"))
"""

from __future__ import annotations

import dataclasses
import json
import math
import warnings
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from .config import AssetConfig
from .exceptions import ConfigurationError

__all__ = [
    "SCHEMA_VERSION",
    "to_dict",
    "save_result",
    "load_result",
    "load_assets",
]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Result conversion
# ---------------------------------------------------------------------------

def to_dict(obj: Any, *, tag_non_finite: bool = False) -> Any:
    """
    Convert a result into plain JSON types.

    Dataclasses become dicts, numpy arrays and pandas frames become lists,
    numpy scalars become Python scalars. Non-finite floats (the Sharpe ratio
    of a riskless portfolio, for instance) become None so that the output
    is strict JSON.

    Parameters
    ----------
    obj : Any
        Result record or nested structure.
    tag_non_finite : bool, default False
        Encode non-finite floats as ``{"__float__": "nan" | "inf" | "-inf"}``
        instead of None, keeping them distinct from each other and from None.

    Returns
    -------
    Any
        Structure of dict, list, str, int, float, bool and None.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: to_dict(getattr(obj, f.name), tag_non_finite=tag_non_finite)
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, pd.DataFrame):
        return to_dict(obj.reset_index().to_dict(orient="records"), tag_non_finite=tag_non_finite)
    if isinstance(obj, np.ndarray):
        return to_dict(obj.tolist(), tag_non_finite=tag_non_finite)
    if isinstance(obj, np.generic):
        return to_dict(obj.item(), tag_non_finite=tag_non_finite)
    if isinstance(obj, dict):
        return {str(k): to_dict(v, tag_non_finite=tag_non_finite) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_dict(v, tag_non_finite=tag_non_finite) for v in obj]
    if isinstance(obj, float) and not math.isfinite(obj):
        if tag_non_finite:
            return {"__float__": repr(obj)}
        return None
    return obj


def save_result(result: Any, path: Path) -> None:
    """
    Save a calculator result to a JSON file.

    The payload is ``{"schema_version": ..., "type": <class name>,
    "result": to_dict(result)}``.

    Examples
    --------
    >>> from pathlib import Path
    >>> save_result(calculate_ddm(2, 3, 8), Path("out/ddm.json"))
    """
    payload = {
        "schema_version": SCHEMA_VERSION,
        "type": type(result).__name__,
        "result": to_dict(result),
    }

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)


def _check_schema_version(config: Dict[str, Any]) -> None:
    schema_version = config.get("schema_version", "0.0.0")
    if schema_version != SCHEMA_VERSION:
        warnings.warn(
            f"File schema version {schema_version} differs from current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
        )


def load_result(path: Path) -> Dict[str, Any]:
    """
    Load a saved result payload.

    Returns a dictionary rather than the result class; records such as
    FrontierResult nest other records and are not rebuilt.
    """
    with open(path, "r") as f:
        config = json.load(f)
    _check_schema_version(config)
    return config


# ---------------------------------------------------------------------------
# Asset input files
# ---------------------------------------------------------------------------

def load_assets(path: Path) -> List[AssetConfig]:
    """
    Read a JSON list of assets for frontier analysis.

    Accepts either a bare list or ``{"schema_version": ..., "assets": [...]}``.
    Each entry is validated through ``AssetConfig``.

    Raises
    ------
    ConfigurationError
        If the file is not valid JSON or an entry fails validation.

    Examples
    --------
    >>> # assets.json: [{"name": "Stocks", "expected_return": 10, "std_dev": 18}]
    >>> [a.name for a in load_assets(Path("assets.json"))]
    ['Stocks']
    """
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        _check_schema_version(data)
        data = data.get("assets", [])
    if not isinstance(data, list):
        raise ConfigurationError(f"{path} must contain a list of assets")

    try:
        return [AssetConfig.model_validate(entry) for entry in data]
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid asset in {path}: {e}") from e
