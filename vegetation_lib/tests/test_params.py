"""Tests for configuration, presets, validation and config serialization."""

import json
import pytest
from vegetation_lib.core.result import ErrorCode, OperationStatus
from vegetation_lib.core.species import TreeShape
from vegetation_lib.io.serialize import load_config, save_config
from vegetation_lib.params import (
    GrowthConfig,
    VegetationConfig,
    get_preset,
    get_species_preset,
    list_presets,
    list_species_presets,
    check_config,
    validate_and_warn,
    validate_config,
)


def test_list_presets():
    presets = list_presets()
    assert isinstance(presets, list)
    assert "default_forest" in presets
    assert "sparse_debug" in presets
    assert "dense_grove" in presets


def test_get_preset():
    config = get_preset("default_forest")
    assert config.growth.step_size == 0.35
    assert config.placement.tree_count == 90
    assert [s.id for s in config.species] == ["oak", "pine", "birch", "windswept_pine"]


def test_get_preset_returns_fresh_instance():
    a = get_preset("sparse_debug")
    a.seed = 1
    assert get_preset("sparse_debug").seed == 1337


def test_unknown_preset_raises():
    with pytest.raises(ValueError):
        get_preset("rainforest")
    with pytest.raises(ValueError):
        get_species_preset("baobab")


def test_species_presets():
    assert set(list_species_presets()) == {"oak", "pine", "birch", "cypress", "windswept_pine"}
    assert get_species_preset("pine").shape is TreeShape.CONICAL
    assert get_species_preset("cypress").shape is TreeShape.COLUMNAR
    assert get_species_preset("windswept_pine").wind_skew > 0


@pytest.mark.parametrize("name", ["default_forest", "sparse_debug", "dense_grove"])
def test_presets_validate(name):
    is_valid, warnings = validate_config(get_preset(name))
    assert is_valid is True, warnings


def test_dense_grove_prunes():
    config = get_preset("dense_grove")
    assert config.radius.min_kept_radius > config.radius.twig_radius


def test_validation_flags_cross_field_problems():
    config = get_preset("sparse_debug")
    config.growth.kill_distance = config.growth.influence_radius + 1.0
    config.placement.clearing_radius = config.placement.field_radius
    config.lod.lod1_distance = config.lod.lod2_distance + 10.0
    is_valid, warnings = validate_config(config)

    assert is_valid is False
    assert any("kill_distance" in w for w in warnings)
    assert any("clearing_radius" in w for w in warnings)
    assert any("LOD distances" in w for w in warnings)


def test_validation_flags_bounds_and_species():
    config = VegetationConfig(growth=GrowthConfig(step_size=-1.0), species=[])
    is_valid, warnings = validate_config(config)
    assert is_valid is False
    assert any("growth.step_size" in w for w in warnings)
    assert any("species list is empty" in w for w in warnings)


def test_check_config_reports_invalid_parameters():
    """Findings come back as a warning result tagged INVALID_PARAMETER."""
    config = get_preset("sparse_debug")
    config.growth.kill_distance = config.growth.influence_radius + 1.0
    result = check_config(config)

    assert result.status == OperationStatus.WARNING
    assert not result.is_success()
    assert not result.is_failure()
    assert any("kill_distance" in w for w in result.warnings)
    assert result.error_codes == [ErrorCode.INVALID_PARAMETER.value] * len(result.warnings)


def test_check_config_clean_preset():
    result = check_config(get_preset("default_forest"))
    assert result.status == OperationStatus.SUCCESS
    assert result.warnings == []


def test_validate_and_warn_logs(caplog):
    config = VegetationConfig(species=[])
    with caplog.at_level("WARNING", logger="vegetation_lib.params.validation"):
        assert validate_and_warn(config) is config
    assert "species list is empty" in caplog.text


def test_config_dict_round_trip():
    config = get_preset("dense_grove")
    restored = VegetationConfig.from_dict(config.to_dict())
    assert restored == config


def test_from_dict_fills_defaults():
    config = VegetationConfig.from_dict({"seed": 5, "placement": {"tree_count": 3}})
    assert config.seed == 5
    assert config.placement.tree_count == 3
    assert config.placement.min_spacing == 7.0
    assert config.growth == GrowthConfig()


def test_get_species_lookup():
    config = get_preset("default_forest")
    assert config.get_species("birch").id == "birch"
    with pytest.raises(KeyError):
        config.get_species("cypress")


def test_save_and_load_config(tmp_path):
    config = get_preset("default_forest")
    config.seed = 2024
    path = tmp_path / "forest.json"

    save_config(config, path)
    loaded = load_config(path)

    assert loaded == config
    assert json.loads(path.read_text())["schema_version"] == "1.0"


def test_load_rejects_unknown_schema(tmp_path):
    path = tmp_path / "future.json"
    data = get_preset("sparse_debug").to_dict()
    data["schema_version"] = "9.9"
    path.write_text(json.dumps(data))

    with pytest.raises(ValueError):
        load_config(path)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
