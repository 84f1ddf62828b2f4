"""Unit tests for application settings configuration."""

from pathlib import Path

from invoice_intake.config import Settings


def test_settings_uses_project_env_file_independent_of_cwd():
    """Settings should always include the project .env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_project_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_project_env in normalized
    assert str(Path(".env")) in normalized


def test_processing_defaults_match_simulated_window():
    settings = Settings(_env_file=None)

    assert settings.processing_min_delay_seconds == 15
    assert settings.processing_max_delay_seconds == 45
    assert settings.processing_success_rate == 0.8
    assert settings.default_page_limit == 10


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path))
    monkeypatch.setenv("PROCESSING_SUCCESS_RATE", "0.5")

    settings = Settings(_env_file=None)

    assert settings.upload_dir == str(tmp_path)
    assert settings.processing_success_rate == 0.5


def test_inverted_delay_window_collapses_to_minimum():
    settings = Settings(
        _env_file=None, processing_min_delay_seconds=20, processing_max_delay_seconds=5
    )

    assert settings.processing_max_delay_seconds == 20
