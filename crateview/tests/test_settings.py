import pytest

from crateview.config import CrateViewSettings, get_settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for name in (
        "CRATEVIEW_CONFIG_FILE",
        "CRATEVIEW_LOG_LEVEL",
        "CRATEVIEW_ENVIRONMENT",
        "CRATEVIEW_STRICT_PRECONDITIONS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_are_strict_outside_production():
    settings = CrateViewSettings()

    assert str(settings.api_base_url).startswith("https://crates.io/api/v1")
    assert settings.environment == "development"
    assert settings.preconditions_are_strict is True


def test_env_values_are_normalized(monkeypatch):
    monkeypatch.setenv("CRATEVIEW_LOG_LEVEL", "debug")
    monkeypatch.setenv("CRATEVIEW_ENVIRONMENT", "Production")

    settings = CrateViewSettings()

    assert settings.log_level == "DEBUG"
    assert settings.environment == "production"
    assert settings.preconditions_are_strict is False


def test_yaml_file_seeds_settings(monkeypatch, tmp_path):
    config = tmp_path / "crateview.yaml"
    config.write_text("environment: production\nversions_page_size: 25\n", encoding="utf-8")
    monkeypatch.setenv("CRATEVIEW_CONFIG_FILE", str(config))

    settings = get_settings()

    assert settings.config_path == config
    assert settings.versions_page_size == 25
    assert settings.preconditions_are_strict is False
    assert get_settings() is settings


def test_explicit_override_beats_environment():
    settings = CrateViewSettings(environment="production", strict_preconditions=True)

    assert settings.preconditions_are_strict is True


def test_invalid_yaml_is_reported(monkeypatch, tmp_path):
    config = tmp_path / "broken.yaml"
    config.write_text("environment: [unterminated\n", encoding="utf-8")
    monkeypatch.setenv("CRATEVIEW_CONFIG_FILE", str(config))

    with pytest.raises(ValueError, match="Invalid crateview config file"):
        CrateViewSettings()


def test_non_mapping_yaml_is_rejected(monkeypatch, tmp_path):
    config = tmp_path / "list.yaml"
    config.write_text("- one\n- two\n", encoding="utf-8")
    monkeypatch.setenv("CRATEVIEW_CONFIG_FILE", str(config))

    with pytest.raises(ValueError, match="must contain a mapping"):
        CrateViewSettings()
