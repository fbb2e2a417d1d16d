"""Request builder — turns an encoded photo and an API key into a Gemini request."""
import json
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from src.constants import (
    GEMINI_KEY_PARAM,
    MEAL_ANALYSIS_PROMPT,
    MSG_ERR_INVALID_URL,
    RESPONSE_MIME_TYPE,
)
from src.credentials import is_configured
from src.vision.errors import (
    CredentialEncodingError,
    InvalidEndpointError,
    MissingCredentialError,
)
from src.vision.image import EncodedImage


@dataclass(frozen=True)
class InferenceRequest:
    url: str
    prompt: str
    image_data: str
    media_type: str
    response_mime_type: str = RESPONSE_MIME_TYPE

    def body(self) -> dict:
        return {
            "contents": [
                {
                    "parts": [
                        {"text": self.prompt},
                        {
                            "inline_data": {
                                "mime_type": self.media_type,
                                "data": self.image_data,
                            }
                        },
                    ]
                }
            ],
            "generationConfig": {"response_mime_type": self.response_mime_type},
        }

    def content(self) -> bytes:
        return json.dumps(self.body()).encode()

    @property
    def redacted_url(self) -> str:
        return str(httpx.URL(self.url).copy_remove_param(GEMINI_KEY_PARAM))


def encode_credential(credential: str | None) -> str:
    """Validate the API key and percent-encode it for a query string."""
    match is_configured(credential):
        case False:
            raise MissingCredentialError()
        case True:
            pass
    try:
        return quote(credential.strip(), safe="")
    except (UnicodeError, TypeError) as exc:
        raise CredentialEncodingError() from exc


def keyed_url(endpoint: str, encoded_key: str) -> str:
    """Append ``?key=`` to the endpoint; InvalidEndpointError if the result isn't an http(s) URL."""
    raw = f"{endpoint}?{GEMINI_KEY_PARAM}={encoded_key}"
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise InvalidEndpointError(MSG_ERR_INVALID_URL % endpoint) from exc
    match (url.scheme, url.host):
        case ("http" | "https", str() as host) if host:
            return raw
        case _:
            raise InvalidEndpointError(MSG_ERR_INVALID_URL % endpoint)


def build_request(
    image: EncodedImage,
    credential: str | None,
    endpoint: str,
    prompt: str = MEAL_ANALYSIS_PROMPT,
) -> InferenceRequest:
    url = keyed_url(endpoint, encode_credential(credential))
    return InferenceRequest(
        url=url,
        prompt=prompt,
        image_data=image.to_base64(),
        media_type=image.media_type,
    )
