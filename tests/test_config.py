import json

import pytest

from daisyworld.config import (
    GrowthParameters,
    SimulationConfig,
    StabilityPolicy,
    load_config,
    save_config,
)


def test_normalized_clamps_out_of_range_fields() -> None:
    config = SimulationConfig(
        solar_luminosity=-2.0,
        bare_soil_albedo=1.4,
        initial_temp=500.0,
        white_daisy_albedo=-0.1,
        black_daisy_albedo=2.0,
        death_rate=3.0,
        optimal_temp=100.0,
        simulation_speed=50.0,
    ).normalized()

    assert config.solar_luminosity == 0.0
    assert config.bare_soil_albedo == 1.0
    assert config.initial_temp == 350.0
    assert config.white_daisy_albedo == 0.0
    assert config.black_daisy_albedo == 1.0
    assert config.death_rate == 1.0
    assert config.optimal_temp == 250.0
    assert config.simulation_speed == 10.0


def test_normalized_gives_black_the_free_surface_on_overlap() -> None:
    config = SimulationConfig(white_daisy_init=0.7, black_daisy_init=0.6).normalized()

    assert config.white_daisy_init == 0.7
    assert config.black_daisy_init == pytest.approx(0.3)


def test_from_dict_accepts_control_surface_names() -> None:
    config = SimulationConfig.from_dict(
        {
            "solarLuminosity": 1.2,
            "whiteDaisyInit": "0.3",
            "death_rate": 0.25,
            "growth": {"max_growth_rate": 0.8},
        }
    )

    assert config.solar_luminosity == 1.2
    assert config.white_daisy_init == 0.3
    assert config.death_rate == 0.25
    assert config.growth.max_growth_rate == 0.8
    assert config.stability == StabilityPolicy()


def test_from_dict_rejects_unknown_field() -> None:
    with pytest.raises(ValueError):
        SimulationConfig.from_dict({"cloudCover": 0.4})


def test_save_and_load_config(tmp_path) -> None:
    config = SimulationConfig(
        solar_luminosity=1.1,
        death_rate=0.2,
        stability=StabilityPolicy(max_coverage_change=0.1),
    )

    path = save_config(config, tmp_path / "configs" / "run.json")

    assert json.loads(path.read_text(encoding="utf-8"))["death_rate"] == 0.2
    assert load_config(path) == config


def test_load_config_errors(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.json")

    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_invalid_parameter_groups_raise() -> None:
    with pytest.raises(ValueError):
        GrowthParameters(min_growth_temp=0.0)
    with pytest.raises(ValueError):
        GrowthParameters(growth_exponent=-1.0)
    with pytest.raises(ValueError):
        StabilityPolicy(min_temperature=360.0)
    with pytest.raises(ValueError):
        StabilityPolicy(damped_temperature_step=25.0)
    with pytest.raises(ValueError):
        StabilityPolicy(max_coverage_change=0.0)


def test_clamp_temperature_uses_band() -> None:
    policy = StabilityPolicy(min_temperature=260.0, max_temperature=320.0)

    assert policy.clamp_temperature(200.0) == 260.0
    assert policy.clamp_temperature(330.0) == 320.0
    assert policy.clamp_temperature(300.0) == 300.0
