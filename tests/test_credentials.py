import pytest

from src.credentials import (
    CredentialSource,
    EnvCredentialSource,
    StaticCredentialSource,
    is_configured,
)


def test_sources_implement_abc():
    assert issubclass(EnvCredentialSource, CredentialSource)
    assert issubclass(StaticCredentialSource, CredentialSource)


@pytest.mark.parametrize("value", [None, "", "   ", "YOUR_API_KEY_HERE", "\tYOUR_API_KEY_HERE\n"])
def test_placeholder_or_blank_is_not_configured(value):
    assert not is_configured(value)


def test_real_key_is_configured():
    assert is_configured("AIzaSy-example")


def test_env_source_reads_at_call_time(monkeypatch):
    monkeypatch.setattr("src.credentials.load_dotenv", lambda *_, **__: None)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    source = EnvCredentialSource()

    assert source.get() is None

    monkeypatch.setenv("GEMINI_API_KEY", "rotated-key")
    assert source.get() == "rotated-key"


def test_env_source_custom_variable(monkeypatch):
    monkeypatch.setattr("src.credentials.load_dotenv", lambda *_, **__: None)
    monkeypatch.setenv("MY_KEY", "abc")

    assert EnvCredentialSource("MY_KEY").get() == "abc"


def test_static_source_returns_value():
    assert StaticCredentialSource("k").get() == "k"
