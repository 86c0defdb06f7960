"""Test that all public exports are importable."""

import pytest


def test_import_main():
    import timecapsule
    assert hasattr(timecapsule, "select_window")
    assert hasattr(timecapsule, "__version__")


def test_import_pipeline():
    from timecapsule import (
        build_season_map,
        get_season_range,
        shuffle,
        take,
        LibraryAggregator,
        select_window,
        build_seed,
        PlaylistMaterializer,
    )
    assert all([
        build_season_map,
        get_season_range,
        shuffle,
        take,
        LibraryAggregator,
        select_window,
        build_seed,
        PlaylistMaterializer,
    ])


def test_import_errors():
    from timecapsule import (
        TimeCapsuleError,
        ConfigurationError,
        FetchFailure,
        EmptySelection,
        CreateFailure,
        AddFailure,
    )
    for exc in (ConfigurationError, FetchFailure, EmptySelection, CreateFailure, AddFailure):
        assert issubclass(exc, TimeCapsuleError)


def test_import_ratelimit():
    from timecapsule.ratelimit import RateLimiter, RateLimitError
    assert RateLimiter is not None
    assert RateLimitError is not None


def test_config_years(monkeypatch):
    from timecapsule import config
    from timecapsule.errors import ConfigurationError

    monkeypatch.delenv("TIMECAPSULE_YEARS", raising=False)
    assert config.load_years() == [2019, 2020, 2021, 2022]
    assert config.load_years("2021, 2020,2021") == [2020, 2021]
    with pytest.raises(ConfigurationError):
        config.load_years("twenty")
    with pytest.raises(ConfigurationError):
        config.load_years(" , ")


def test_default_data_dir(tmp_path, monkeypatch):
    from timecapsule import config

    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    installed = tmp_path / "site-packages"
    installed.mkdir()
    assert config.default_data_dir(installed) == tmp_path / "home" / ".timecapsule"

    checkout = tmp_path / "checkout"
    checkout.mkdir()
    (checkout / "pyproject.toml").write_text("[project]\n")
    assert config.default_data_dir(checkout) == checkout / "data"
