import pytest

from cinemood.config import AppConfig, ConfigManager, ConfigValidationError


def test_packaged_defaults_load():
    config = ConfigManager().load()

    assert config == AppConfig()
    assert config.experiments.significance_level == 0.05
    assert config.mood.intensifiers == ["very", "extremely", "really", "totally", "absolutely"]


def test_yaml_values_override_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "experiments:\n  significance_level: 0.01\nlogging:\n  format: text\n",
        encoding="utf-8",
    )

    config = ConfigManager().load(str(path))

    assert config.experiments.significance_level == 0.01
    assert config.experiments.conversion_event == "conversion"
    assert config.logging.format == "text"


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("logging:\n  level: INFO\n", encoding="utf-8")
    monkeypatch.setenv("CINEMOOD_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("CINEMOOD_DEFAULT_LIMIT", "25")

    manager = ConfigManager()
    manager.load(str(path))

    assert manager.get("logging.level") == "DEBUG"
    assert manager.get("recommendation.default_limit") == 25


def test_invalid_environment_value_is_rejected(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    monkeypatch.setenv("CINEMOOD_SIGNIFICANCE_LEVEL", "often")

    with pytest.raises(ConfigValidationError):
        ConfigManager().load(str(path))


def test_validation_collects_every_error(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "experiments:\n  significance_level: 1.5\nrecommendation:\n  rating_scale: 0\n",
        encoding="utf-8",
    )

    with pytest.raises(ConfigValidationError) as exc_info:
        ConfigManager().load(str(path))
    assert "significance_level" in str(exc_info.value)
    assert "rating_scale" in str(exc_info.value)


def test_unknown_keys_are_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("mood:\n  sarcasm_detection: true\n", encoding="utf-8")

    with pytest.raises(ConfigValidationError):
        ConfigManager().load(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigManager().load(str(tmp_path / "absent.yaml"))


def test_get_before_load_raises():
    with pytest.raises(RuntimeError):
        ConfigManager().get("logging.level")


def test_get_unknown_key():
    manager = ConfigManager()
    manager.load()

    with pytest.raises(KeyError):
        manager.get("logging.colour")
