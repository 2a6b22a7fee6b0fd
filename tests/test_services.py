import json
from unittest.mock import Mock

import pytest
import requests

import audioweather.stt_service as stt
import audioweather.summarizer as summarizer
import audioweather.weather_service as weather
from audioweather.exceptions import ForecastUnavailableError, ServiceError

FORECAST = {"dt_txt": "2026-10-17 15:00:00", "main": {"temp": 15}, "weather": [{"description": "lluvia ligera"}]}


def ok_response(body):
    return Mock(ok=True, status_code=200, json=lambda: body, text=json.dumps(body))


def error_response(status, text="error"):
    return Mock(ok=False, status_code=status, json=lambda: {}, text=text)


class Recorder:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


def test_transcribe(monkeypatch, tmp_path, settings):
    audio = tmp_path / "audio-1.m4a"
    audio.write_bytes(b"fake")
    post = Recorder(ok_response({"text": "hace frío"}))
    monkeypatch.setattr(stt.requests, "post", post)

    assert stt.transcribe(audio, settings) == "hace frío"
    url, kwargs = post.calls[0]
    assert url == settings.transcription_url
    assert kwargs["headers"] == {"Authorization": "Bearer sk-test"}
    assert kwargs["data"] == {"model": "whisper-1", "language": "es"}
    assert kwargs["files"]["file"][0] == "audio-1.m4a"


def test_transcribe_http_error(monkeypatch, tmp_path, settings):
    audio = tmp_path / "audio-1.m4a"
    audio.write_bytes(b"fake")
    monkeypatch.setattr(stt.requests, "post", Recorder(error_response(401, "invalid api key")))
    with pytest.raises(ServiceError, match="invalid api key") as info:
        stt.transcribe(audio, settings)
    assert info.value.service == "transcription"


def test_transcribe_network_error(monkeypatch, tmp_path, settings):
    audio = tmp_path / "audio-1.m4a"
    audio.write_bytes(b"fake")
    monkeypatch.setattr(stt.requests, "post", Recorder(exc=requests.ConnectionError("refused")))
    with pytest.raises(ServiceError, match="refused"):
        stt.transcribe(audio, settings)


def test_transcribe_unexpected_body(monkeypatch, tmp_path, settings):
    audio = tmp_path / "audio-1.m4a"
    audio.write_bytes(b"fake")
    monkeypatch.setattr(stt.requests, "post", Recorder(ok_response({"foo": 1})))
    with pytest.raises(ServiceError):
        stt.transcribe(audio, settings)


def test_get_forecast_returns_first_entry(monkeypatch, settings):
    get = Recorder(ok_response({"list": [FORECAST, {"dt_txt": "later"}]}))
    monkeypatch.setattr(weather.requests, "get", get)

    assert weather.get_forecast("10", "20", settings) == FORECAST
    url, kwargs = get.calls[0]
    assert url == settings.forecast_url
    assert kwargs["params"] == {
        "lat": "10",
        "lon": "20",
        "appid": "ow-secret",
        "units": "metric",
        "lang": "es",
    }


def test_get_forecast_empty_list(monkeypatch, settings):
    monkeypatch.setattr(weather.requests, "get", Recorder(ok_response({"list": []})))
    with pytest.raises(ForecastUnavailableError):
        weather.get_forecast("10", "20", settings)


def test_get_forecast_error_hides_key(monkeypatch, settings):
    exc = requests.ConnectionError("Max retries exceeded with url: /forecast?appid=ow-secret")
    monkeypatch.setattr(weather.requests, "get", Recorder(exc=exc))
    with pytest.raises(ServiceError) as info:
        weather.get_forecast("10", "20", settings)
    assert "ow-secret" not in str(info.value)
    assert "***" in str(info.value)
    assert info.value.__cause__ is None
    assert info.value.__suppress_context__


def test_get_forecast_http_error(monkeypatch, settings):
    monkeypatch.setattr(weather.requests, "get", Recorder(error_response(404, "city not found")))
    with pytest.raises(ServiceError, match="404"):
        weather.get_forecast("10", "20", settings)


def test_build_prompt():
    prompt = summarizer.build_prompt("¿lloverá hoy?", FORECAST)
    assert 'Usuario dijo por voz: "¿lloverá hoy?"' in prompt
    assert '"description": "lluvia ligera"' in prompt
    assert prompt.endswith("en español sobre el clima.")


def test_summarise(monkeypatch, settings):
    body = {"choices": [{"message": {"role": "assistant", "content": "Hoy hace frío, unos 15 grados."}}]}
    post = Recorder(ok_response(body))
    monkeypatch.setattr(summarizer.requests, "post", post)

    assert summarizer.summarise("hace frío", FORECAST, settings) == "Hoy hace frío, unos 15 grados."
    url, kwargs = post.calls[0]
    assert url == settings.chat_url
    assert kwargs["json"]["model"] == "gpt-3.5-turbo"
    system, user = kwargs["json"]["messages"]
    assert system == {"role": "system", "content": "Eres un asistente meteorológico experto."}
    assert '"hace frío"' in user["content"]


def test_summarise_no_choices(monkeypatch, settings):
    monkeypatch.setattr(summarizer.requests, "post", Recorder(ok_response({"choices": []})))
    with pytest.raises(ServiceError) as info:
        summarizer.summarise("hace frío", FORECAST, settings)
    assert info.value.service == "summarization"
