import pandas as pd
import pytest

from daisyworld.config import SimulationConfig
from daisyworld.engine.model import DaisyworldEngine
from daisyworld.twin.simulator import (
    FRAME_COLUMNS,
    TimeSeriesRecorder,
    build_visual_frame,
    run_simulation,
)


def test_run_simulation_returns_expected_columns() -> None:
    df = run_simulation(steps=48)

    assert len(df) == 49
    assert list(df.columns) == list(FRAME_COLUMNS)
    assert df["time"].tolist() == [float(t) for t in range(49)]
    assert df.iloc[0]["temperature_k"] == 295.0
    assert df["temperature_k"].between(250.0, 350.0).all()
    total = df["white_coverage"] + df["black_coverage"] + df["bare_soil_coverage"]
    assert ((total - 1.0).abs() < 1e-9).all()
    assert (df["temperature_c"] == df["temperature_k"] - 273.15).all()


def test_run_simulation_applies_luminosity_schedule() -> None:
    df = run_simulation(steps=10, luminosity_schedule=lambda time: 1.0 + (0.01 * time))

    assert df.iloc[0]["solar_luminosity"] == pytest.approx(1.0)
    assert df.iloc[-1]["solar_luminosity"] == pytest.approx(1.09)
    assert df["solar_luminosity"].is_monotonic_increasing


def test_run_simulation_reuses_engine_and_detaches() -> None:
    engine = DaisyworldEngine()
    engine.step()

    df = run_simulation(steps=5, engine=engine)

    assert df["time"].tolist() == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    assert engine.subscriber_count == 0


def test_run_simulation_rejects_invalid_arguments() -> None:
    with pytest.raises(ValueError):
        run_simulation(steps=0)
    with pytest.raises(ValueError):
        run_simulation(steps=3, engine=DaisyworldEngine(), config=SimulationConfig())


def test_recorder_keeps_rolling_window() -> None:
    engine = DaisyworldEngine()
    recorder = TimeSeriesRecorder(max_points=5)
    recorder.attach(engine)

    for _ in range(12):
        engine.step()

    frame = recorder.to_frame()
    assert len(recorder) == 5
    assert recorder.max_points == 5
    assert frame["time"].tolist() == [8.0, 9.0, 10.0, 11.0, 12.0]

    recorder.clear()
    assert len(recorder) == 0
    assert list(recorder.to_frame().columns) == list(FRAME_COLUMNS)


def test_recorder_detaches_with_unsubscribe() -> None:
    engine = DaisyworldEngine()
    recorder = TimeSeriesRecorder()
    unsubscribe = recorder.attach(engine, include_current=True)

    engine.step()
    unsubscribe()
    engine.step()

    assert len(recorder) == 2


def test_recorder_rejects_non_positive_window() -> None:
    with pytest.raises(ValueError):
        TimeSeriesRecorder(max_points=0)


def test_recorder_writes_csv(tmp_path) -> None:
    engine = DaisyworldEngine()
    recorder = TimeSeriesRecorder()
    recorder.attach(engine, include_current=True)
    for _ in range(4):
        engine.step()

    written = recorder.to_csv(tmp_path / "exports" / "series.csv")

    assert written.exists()
    loaded = pd.read_csv(written)
    assert len(loaded) == 5
    assert set(FRAME_COLUMNS).issubset(set(loaded.columns))
    assert loaded["time"].tolist() == [0, 1, 2, 3, 4]


def test_build_visual_frame_maps_segments_and_labels() -> None:
    frame = build_visual_frame(
        {
            "time": 12,
            "white_coverage": 0.3,
            "black_coverage": 0.2,
            "temperature_k": 300.0,
            "solar_luminosity": 1.2,
            "albedo": 0.525,
        }
    )

    segments = frame["segments"]
    assert [segment["surface"] for segment in segments] == ["bare_soil", "white", "black"]
    assert [segment["portion"] for segment in segments] == pytest.approx([0.5, 0.3, 0.2])
    assert frame["time"] == 12.0
    assert frame["temperature_c"] == pytest.approx(26.85)
    assert frame["temperature_label"] == "Temperature: 300.0K"
    assert frame["luminosity_label"] == "Solar Luminosity: 1.20"


def test_build_visual_frame_from_series_and_bad_values() -> None:
    row = run_simulation(steps=3).iloc[-1]
    frame = build_visual_frame(row)
    assert sum(segment["portion"] for segment in frame["segments"]) == pytest.approx(1.0)

    degraded = build_visual_frame({"white_coverage": "n/a", "black_coverage": 1.7})
    portions = [segment["portion"] for segment in degraded["segments"]]
    assert portions == [0.0, 0.0, 1.0]
    assert degraded["solar_luminosity"] == 1.0
