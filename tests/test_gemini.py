"""GeminiVisionClient — full pipeline against a faked httpx.AsyncClient."""
import io
import json
from contextlib import contextmanager
from unittest.mock import AsyncMock, call, patch

import httpx
import pytest
from PIL import Image

from src.credentials import StaticCredentialSource
from src.meal import Cholesterol
from src.vision.client import VisionClient
from src.vision.errors import (
    ImageProcessingError,
    MalformedEnvelopeError,
    MalformedPayloadError,
    MissingCredentialError,
    ModelNotFoundError,
    ProviderError,
    TransportError,
)
from src.vision.gemini import GeminiVisionClient

API_BASE = "https://generativelanguage.googleapis.com/v1beta"
GENERATE = API_BASE + "/models/gemini-2.5-flash-lite:generateContent"
MODELS = API_BASE + "/models"

SALAD = {
    "name": "Salad",
    "calories": 150,
    "protein": 5,
    "carbs": 10,
    "fat": 8,
    "cholesterol": "Low",
    "isAlcoholic": False,
    "warnings": [],
}


def make_client(key: str | None = "test-key") -> GeminiVisionClient:
    return GeminiVisionClient(
        StaticCredentialSource(key),
        generate_endpoint=GENERATE,
        models_endpoint=MODELS,
    )


def make_photo(size: tuple[int, int] = (64, 48)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, (200, 120, 40)).save(buf, format="JPEG")
    return buf.getvalue()


def ok(payload: dict | str) -> httpx.Response:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def unavailable() -> httpx.Response:
    return httpx.Response(503, text='{"error": {"status": "UNAVAILABLE"}}')


@contextmanager
def fake_http(post=None, get=None):
    http = AsyncMock()
    http.post = AsyncMock(side_effect=post)
    http.get = AsyncMock(side_effect=get)
    with patch("src.vision.gemini.httpx.AsyncClient") as mock_cls, patch(
        "src.vision.gemini.asyncio.sleep", new=AsyncMock()
    ) as mock_sleep:
        mock_cls.return_value.__aenter__.return_value = http
        mock_cls.return_value.__aexit__.return_value = False
        yield http, mock_sleep


def test_gemini_client_implements_abc():
    assert issubclass(GeminiVisionClient, VisionClient)


# ── happy path ────────────────────────────────────────────────────────────────


async def test_analyze_returns_validated_record():
    with fake_http(post=[ok(SALAD)]) as (http, _):
        result = await make_client().analyze(make_photo())

    assert result.name == "Salad"
    assert (result.calories, result.protein, result.carbs, result.fat) == (150, 5, 10, 8)
    assert result.cholesterol is Cholesterol.LOW
    assert result.is_alcoholic is False
    assert result.warnings == ()
    http.post.assert_awaited_once()


async def test_analyze_posts_prompt_image_and_json_directive():
    with fake_http(post=[ok(SALAD)]) as (http, _):
        await make_client().analyze(make_photo())

    url = http.post.call_args.args[0]
    body = json.loads(http.post.call_args.kwargs["content"])
    parts = body["contents"][0]["parts"]
    assert url == GENERATE + "?key=test-key"
    assert "cholesterol" in parts[0]["text"]
    assert parts[1]["inline_data"]["mime_type"] == "image/jpeg"
    assert parts[1]["inline_data"]["data"]
    assert body["generationConfig"] == {"response_mime_type": "application/json"}


async def test_analyze_percent_encodes_key():
    with fake_http(post=[ok(SALAD)]) as (http, _):
        await make_client(" a b&c=d ").analyze(make_photo())

    assert http.post.call_args.args[0].endswith("?key=a%20b%26c%3Dd")


# ── 503 retry ─────────────────────────────────────────────────────────────────


async def test_503_twice_then_success_uses_third_attempt():
    with fake_http(post=[unavailable(), unavailable(), ok(SALAD)]) as (http, mock_sleep):
        result = await make_client().analyze(make_photo())

    assert result.name == "Salad"
    assert http.post.await_count == 3
    assert mock_sleep.await_args_list == [call(2.0), call(2.0)]
    assert sum(c.args[0] for c in mock_sleep.await_args_list) >= 4.0


async def test_503_retries_resend_identical_request():
    with fake_http(post=[unavailable(), ok(SALAD)]) as (http, _):
        await make_client().analyze(make_photo())

    first, second = http.post.call_args_list
    assert first == second


async def test_503_three_times_raises_provider_error_without_fourth_call():
    with fake_http(post=[unavailable(), unavailable(), unavailable(), ok(SALAD)]) as (http, mock_sleep):
        with pytest.raises(ProviderError) as exc_info:
            await make_client().analyze(make_photo())

    assert exc_info.value.status == 503
    assert "UNAVAILABLE" in exc_info.value.body
    assert http.post.await_count == 3
    assert mock_sleep.await_count == 2


# ── terminal statuses ─────────────────────────────────────────────────────────


async def test_other_status_is_terminal_and_carries_body():
    with fake_http(post=[httpx.Response(400, text="API key not valid")]) as (http, mock_sleep):
        with pytest.raises(ProviderError) as exc_info:
            await make_client().analyze(make_photo())

    assert exc_info.value.status == 400
    assert str(exc_info.value) == "API Error (400): API key not valid"
    assert http.post.await_count == 1
    mock_sleep.assert_not_awaited()


async def test_undecodable_error_body_reports_unknown_error():
    with fake_http(post=[httpx.Response(500, content=b"\xff\xfe\xfa")]):
        with pytest.raises(ProviderError, match="Unknown Error"):
            await make_client().analyze(make_photo())


async def test_404_lists_generation_models_without_prefix():
    models = {
        "models": [
            {"name": "models/gemini-a", "supportedGenerationMethods": ["generateContent"]},
            {"name": "models/embedding-001", "supportedGenerationMethods": ["embedContent"]},
            {"name": "models/gemini-b", "supportedGenerationMethods": ["countTokens", "generateContent"]},
        ]
    }
    with fake_http(
        post=[httpx.Response(404, text="model not found")],
        get=[httpx.Response(200, json=models)],
    ) as (http, _):
        with pytest.raises(ModelNotFoundError) as exc_info:
            await make_client().analyze(make_photo())

    assert "gemini-a, gemini-b" in str(exc_info.value)
    assert exc_info.value.status == 404
    http.get.assert_awaited_once_with(MODELS + "?key=test-key")


async def test_404_lists_at_most_three_models():
    models = {
        "models": [
            {"name": f"models/m{i}", "supportedGenerationMethods": ["generateContent"]}
            for i in range(5)
        ]
    }
    with fake_http(post=[httpx.Response(404)], get=[httpx.Response(200, json=models)]):
        with pytest.raises(ModelNotFoundError) as exc_info:
            await make_client().analyze(make_photo())

    assert exc_info.value.available == "m0, m1, m2"


async def test_404_with_failing_model_list_still_reports_not_found():
    with fake_http(post=[httpx.Response(404)], get=httpx.ConnectError("down")):
        with pytest.raises(ModelNotFoundError) as exc_info:
            await make_client().analyze(make_photo())

    assert "No accessible models found." in str(exc_info.value)


@pytest.mark.parametrize("methods", [5, True, "generateContentish", {"generateContent": 1}, None])
async def test_404_skips_models_with_malformed_generation_methods(methods):
    models = {
        "models": [
            {"name": "models/odd", "supportedGenerationMethods": methods},
            {"name": "models/gemini-a", "supportedGenerationMethods": ["generateContent"]},
        ]
    }
    with fake_http(post=[httpx.Response(404)], get=[httpx.Response(200, json=models)]):
        with pytest.raises(ModelNotFoundError) as exc_info:
            await make_client().analyze(make_photo())

    assert exc_info.value.available == "gemini-a"


async def test_404_with_only_malformed_models_reports_none_found():
    models = {"models": [{"name": "models/x", "supportedGenerationMethods": 5}]}
    with fake_http(post=[httpx.Response(404)], get=[httpx.Response(200, json=models)]):
        with pytest.raises(ModelNotFoundError, match="No accessible models found."):
            await make_client().analyze(make_photo())


async def test_404_with_garbage_model_list_still_reports_not_found():
    with fake_http(post=[httpx.Response(404)], get=[httpx.Response(200, text="<html>")]):
        with pytest.raises(ModelNotFoundError, match="No accessible models found."):
            await make_client().analyze(make_photo())


# ── pre-network failures ──────────────────────────────────────────────────────


@pytest.mark.parametrize("key", [None, "", "   ", "YOUR_API_KEY_HERE"])
async def test_missing_credential_makes_no_network_call(key):
    with fake_http(post=[ok(SALAD)]) as (http, _):
        with pytest.raises(MissingCredentialError):
            await make_client(key).analyze(make_photo())

    http.post.assert_not_awaited()


async def test_undecodable_image_makes_no_network_call():
    with fake_http(post=[ok(SALAD)]) as (http, _):
        with pytest.raises(ImageProcessingError):
            await make_client().analyze(b"definitely not an image")

    http.post.assert_not_awaited()


# ── network failures ──────────────────────────────────────────────────────────


async def test_network_error_is_not_retried():
    with fake_http(post=httpx.ConnectTimeout("timed out")) as (http, mock_sleep):
        with pytest.raises(TransportError):
            await make_client().analyze(make_photo())

    assert http.post.await_count == 1
    mock_sleep.assert_not_awaited()


# ── response validation ───────────────────────────────────────────────────────


async def test_non_numeric_calories_is_malformed_payload():
    soup = dict(SALAD, name="Soup", calories="two hundred")
    with fake_http(post=[ok(soup)]):
        with pytest.raises(MalformedPayloadError):
            await make_client().analyze(make_photo())


async def test_empty_candidates_is_malformed_envelope():
    with fake_http(post=[httpx.Response(200, json={"candidates": []})]):
        with pytest.raises(MalformedEnvelopeError):
            await make_client().analyze(make_photo())


async def test_embedded_text_that_is_not_json_is_malformed_payload():
    with fake_http(post=[ok("Sorry, I can't see any food here.")]):
        with pytest.raises(MalformedPayloadError):
            await make_client().analyze(make_photo())
