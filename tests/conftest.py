import pytest

from audioweather.config import Settings
from audioweather.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        openai_api_key="sk-test",
        openweather_key="ow-secret",
        upload_dir=tmp_path / "uploads",
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    app.config["TESTING"] = True
    return app.test_client()
