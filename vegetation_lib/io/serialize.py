"""
JSON serialization for vegetation configurations.

Only configuration is persisted; skeletons and placements are regenerated
from their seeds.
"""

import json
import logging
from pathlib import Path
from typing import Union
from ..params.config import VegetationConfig

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMA_VERSIONS = ("1.0",)


def save_config(
    config: VegetationConfig,
    filepath: Union[str, Path],
    indent: int = 2,
) -> None:
    """
    Save a vegetation config to a JSON file.

    Parameters
    ----------
    config : VegetationConfig
        Config to save
    filepath : str or Path
        Output file path
    indent : int
        JSON indentation level

    Example
    -------
    >>> from vegetation_lib import save_config, get_preset
    >>> save_config(get_preset("default_forest"), "forest.json")
    """
    filepath = Path(filepath)

    data = config.to_dict()

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=indent)

    logger.debug("Saved config to %s", filepath)


def load_config(filepath: Union[str, Path]) -> VegetationConfig:
    """
    Load a vegetation config from a JSON file.

    Parameters
    ----------
    filepath : str or Path
        Input file path

    Returns
    -------
    config : VegetationConfig
        Loaded config; groups or fields missing from the file take their
        default values

    Raises
    ------
    ValueError
        If the file's schema version is not supported
    """
    filepath = Path(filepath)

    with open(filepath, 'r') as f:
        data = json.load(f)

    schema_version = data.get("schema_version", "1.0")
    if schema_version not in SUPPORTED_SCHEMA_VERSIONS:
        raise ValueError(f"Unsupported schema version: {schema_version}")

    return VegetationConfig.from_dict(data)
