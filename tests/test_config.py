import pydantic
import pytest

from audioweather.config import MAX_UPLOAD_BYTES, load_settings


def test_defaults():
    settings = load_settings({})
    assert settings.port == 4000
    assert settings.max_upload_bytes == MAX_UPLOAD_BYTES == 25 * 1024 * 1024
    assert settings.upload_dir.name == "uploads"
    assert settings.upload_dir.is_absolute()
    assert settings.missing_credentials() == ["OPENAI_API_KEY", "OPENWEATHER_KEY"]


def test_from_environment(tmp_path):
    settings = load_settings(
        {
            "PORT": "5050",
            "OPENAI_API_KEY": "sk-1",
            "OPENWEATHER_KEY": "ow-1",
            "UPLOAD_DIR": str(tmp_path),
            "CHAT_MODEL": "gpt-4o-mini",
        }
    )
    assert settings.port == 5050
    assert settings.upload_dir == tmp_path.resolve()
    assert settings.chat_model == "gpt-4o-mini"
    assert settings.missing_credentials() == []


def test_invalid_port():
    with pytest.raises(pydantic.ValidationError):
        load_settings({"PORT": "not-a-port"})


def test_settings_are_frozen():
    settings = load_settings({})
    with pytest.raises(pydantic.ValidationError):
        settings.port = 1
