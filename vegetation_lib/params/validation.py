"""Parameter validation with bounds checking.

Generation itself never checks its inputs; this module is the explicit,
opt-in check callers run before handing a configuration to the pipeline.

Units: All spatial parameters are in meters.
"""

import logging
from typing import List, Tuple

from ..core.result import ErrorCode, OperationResult, OperationStatus
from .config import VegetationConfig

logger = logging.getLogger(__name__)


PARAM_BOUNDS = {
    "growth.step_size": (0.01, 5.0, "m"),
    "growth.influence_radius": (0.05, 50.0, "m"),
    "growth.kill_distance": (0.01, 20.0, "m"),
    "growth.max_iterations": (1, 1000, "iterations"),
    "growth.apical_dominance": (0.0, 5.0, "weight"),
    "growth.lateral_bias": (0.0, 1.0, "ratio"),
    "growth.trunk_lift_bias": (0.0, 5.0, "weight"),
    "radius.gamma": (0.5, 4.0, "exponent"),
    "radius.twig_radius": (0.001, 1.0, "m"),
    "radius.min_kept_radius": (0.0, 1.0, "m"),
    "radius.trunk_preserve_depth": (0, 1000, "depth"),
    "placement.tree_count": (0, 100000, "trees"),
    "placement.field_radius": (0.1, 100000.0, "m"),
    "placement.clearing_radius": (0.0, 100000.0, "m"),
    "placement.min_spacing": (0.01, 1000.0, "m"),
    "placement.max_slope": (0.0, 100.0, "rise/run"),
    "placement.rock_clearance": (0.0, 1000.0, "m"),
    "placement.poisson_attempts": (1, 1000, "attempts"),
    "placement.max_placement_attempts": (0, 10000000, "attempts"),
    "placement.density_noise_scale": (0.0, 100.0, "1/m"),
    "placement.density_threshold": (0.0, 1.0, "ratio"),
    "placement.density_jitter": (0.0, 1.0, "ratio"),
    "lod.lod0_distance": (0.0, 100000.0, "m"),
    "lod.lod1_distance": (0.0, 100000.0, "m"),
    "lod.lod2_distance": (0.0, 100000.0, "m"),
    "lod.hidden_distance": (0.0, 100000.0, "m"),
    "lod.hysteresis": (0.0, 1000.0, "m"),
    "lod.update_hz": (0.01, 1000.0, "Hz"),
    "variants_per_species": (1, 100, "variants"),
}


def _lookup(config: VegetationConfig, dotted: str):
    value = config
    for part in dotted.split("."):
        value = getattr(value, part, None)
        if value is None:
            return None
    return value


def validate_config(config: VegetationConfig) -> Tuple[bool, List[str]]:
    """
    Validate a VegetationConfig against bounds and cross-field rules.

    Parameters
    ----------
    config : VegetationConfig
        Configuration to validate

    Returns
    -------
    is_valid : bool
        True if all parameters are valid
    warnings : list of str
        List of validation warnings/errors
    """
    warnings = []

    for param_name, (min_val, max_val, unit) in PARAM_BOUNDS.items():
        value = _lookup(config, param_name)

        if value is None:
            continue

        if value < min_val:
            warnings.append(
                f"{param_name} = {value} {unit} is below minimum {min_val} {unit}"
            )
        elif value > max_val:
            warnings.append(
                f"{param_name} = {value} {unit} exceeds maximum {max_val} {unit}"
            )

    growth = config.growth
    if growth.kill_distance >= growth.influence_radius:
        warnings.append(
            f"growth.kill_distance ({growth.kill_distance}m) should be < "
            f"growth.influence_radius ({growth.influence_radius}m)"
        )

    if growth.step_size > growth.influence_radius:
        warnings.append(
            f"growth.step_size ({growth.step_size}m) is larger than influence_radius "
            f"({growth.influence_radius}m), which may stall growth"
        )

    radius = config.radius
    if radius.min_kept_radius > radius.twig_radius * 4.0:
        warnings.append(
            f"radius.min_kept_radius ({radius.min_kept_radius}m) is far above twig_radius "
            f"({radius.twig_radius}m); pruning will strip most of the crown"
        )

    placement = config.placement
    if placement.clearing_radius >= placement.field_radius:
        warnings.append(
            f"placement.clearing_radius ({placement.clearing_radius}m) must be < "
            f"field_radius ({placement.field_radius}m); no tree can be placed"
        )

    lod = config.lod
    distances = [lod.lod0_distance, lod.lod1_distance, lod.lod2_distance, lod.hidden_distance]
    if any(a > b for a, b in zip(distances, distances[1:])):
        warnings.append(
            f"LOD distances must be non-decreasing (lod0 <= lod1 <= lod2 <= hidden), got {distances}"
        )

    gaps = [b - a for a, b in zip(distances, distances[1:])]
    if gaps and lod.hysteresis * 2.0 > min(gaps):
        warnings.append(
            f"lod.hysteresis ({lod.hysteresis}m) overlaps adjacent LOD bands "
            f"(smallest gap {min(gaps)}m)"
        )

    if not config.species:
        warnings.append("species list is empty; placement needs at least one species")
    else:
        total_weight = sum(s.placement_weight for s in config.species)
        if total_weight <= 0:
            warnings.append(f"total species placement_weight is {total_weight}, must be > 0")

        seen = set()
        for species in config.species:
            if species.id in seen:
                warnings.append(f"duplicate species id '{species.id}'")
            seen.add(species.id)

            for range_name in ("trunk_height", "canopy_height", "canopy_radius", "attractor_count"):
                low, high = getattr(species, range_name)
                if low > high:
                    warnings.append(
                        f"species '{species.id}' {range_name} range is inverted ({low} > {high})"
                    )

    is_valid = len(warnings) == 0
    return is_valid, warnings


def check_config(config: VegetationConfig) -> OperationResult:
    """
    Validate a configuration and report the findings as a result.

    Returns
    -------
    result : OperationResult
        Success when the configuration is clean, otherwise a warning result
        with one ``INVALID_PARAMETER`` entry per finding.
    """
    is_valid, warnings = validate_config(config)

    if is_valid:
        return OperationResult.success("Configuration is valid")

    result = OperationResult(
        status=OperationStatus.WARNING,
        message=f"Configuration has {len(warnings)} validation findings",
    )
    for warning in warnings:
        result.add_warning(warning, ErrorCode.INVALID_PARAMETER)
    return result


def validate_and_warn(config: VegetationConfig) -> VegetationConfig:
    """
    Validate a configuration and log any findings.

    Parameters
    ----------
    config : VegetationConfig
        Configuration to validate

    Returns
    -------
    config : VegetationConfig
        Same configuration (for chaining)
    """
    is_valid, warnings = validate_config(config)

    if not is_valid:
        logger.warning("Parameter validation warnings (%d):", len(warnings))
        for warning in warnings:
            logger.warning("  - %s", warning)

    return config
