"""GeminiVisionClient — Google Gemini generateContent backend with 503 retry."""
import asyncio
import logging
import time

import httpx

from src.constants import (
    CONTENT_TYPE_HEADER,
    GEMINI_GENERATE_METHOD,
    GEMINI_MAX_LISTED_MODELS,
    GEMINI_MODEL_PREFIX,
    GEMINI_TIMEOUT,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_UNAVAILABLE,
    MSG_ANALYSIS_DONE,
    MSG_ERR_NO_MODELS,
    MSG_ERR_TRANSPORT,
    MSG_ERR_UNKNOWN_BODY,
    MSG_MODEL_LIST_FAILED,
    MSG_MODEL_NOT_FOUND_LOG,
    MSG_RETRY_UNAVAILABLE,
    RETRY_DELAY_SECONDS,
    RETRY_MAX_ATTEMPTS,
)
from src.credentials import CredentialSource
from src.meal import MealAnalysis
from src.vision.client import VisionClient
from src.vision.errors import (
    MealAnalysisError,
    ModelNotFoundError,
    ProviderError,
    TransportError,
)
from src.vision.image import normalize_image
from src.vision.parsing import parse_response
from src.vision.request import (
    InferenceRequest,
    build_request,
    encode_credential,
    keyed_url,
)

logger = logging.getLogger(__name__)


def _body_text(response: httpx.Response) -> str:
    try:
        return response.content.decode("utf-8")
    except UnicodeDecodeError:
        return MSG_ERR_UNKNOWN_BODY


def _generation_model_names(payload: object) -> list[str]:
    """Names of models that support generateContent, ``models/`` prefix stripped."""
    match payload:
        case {"models": list() as models}:
            pass
        case _:
            return []
    names = []
    for model in models:
        match model:
            case {"name": str() as name, "supportedGenerationMethods": list() as methods} if (
                GEMINI_GENERATE_METHOD in methods
            ):
                names.append(name.removeprefix(GEMINI_MODEL_PREFIX))
            case _:
                pass
    return names[:GEMINI_MAX_LISTED_MODELS]


class GeminiVisionClient(VisionClient):

    def __init__(
        self,
        credentials: CredentialSource,
        generate_endpoint: str,
        models_endpoint: str,
        timeout: float = GEMINI_TIMEOUT,
        max_attempts: int = RETRY_MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY_SECONDS,
    ) -> None:
        self._credentials = credentials
        self._generate_endpoint = generate_endpoint
        self._models_endpoint = models_endpoint
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay

    async def analyze(self, image_bytes: bytes) -> MealAnalysis:
        start = time.monotonic()
        image = normalize_image(image_bytes)
        credential = self._credentials.get()
        request = build_request(image, credential, self._generate_endpoint)

        async with httpx.AsyncClient(timeout=self._timeout) as http:
            response, attempts = await self._send_with_retry(http, request)
            match response.status_code:
                case status if status == HTTP_OK:
                    pass
                case status if status == HTTP_NOT_FOUND:
                    logger.warning(MSG_MODEL_NOT_FOUND_LOG, request.redacted_url)
                    available = await self._list_models(http, credential)
                    raise ModelNotFoundError(_body_text(response), available)
                case status:
                    raise ProviderError(status, _body_text(response))

        analysis = parse_response(response.content)
        logger.info(MSG_ANALYSIS_DONE, analysis.name, time.monotonic() - start, attempts)
        return analysis

    async def _send_with_retry(
        self, http: httpx.AsyncClient, request: InferenceRequest
    ) -> tuple[httpx.Response, int]:
        """POST the request, retrying only on 503 with a fixed delay.

        Returns the first non-503 response, or the last 503 once
        ``max_attempts`` calls have been made. Network failures are not
        retried.
        """
        content = request.content()
        attempt = 1
        while True:
            try:
                response = await http.post(
                    request.url, content=content, headers=CONTENT_TYPE_HEADER
                )
            except httpx.TransportError as exc:
                raise TransportError(MSG_ERR_TRANSPORT % type(exc).__name__) from exc

            match (response.status_code, attempt < self._max_attempts):
                case (status, True) if status == HTTP_UNAVAILABLE:
                    logger.warning(
                        MSG_RETRY_UNAVAILABLE, attempt + 1, self._max_attempts, self._retry_delay
                    )
                    await asyncio.sleep(self._retry_delay)
                    attempt += 1
                case _:
                    return response, attempt

    async def _list_models(self, http: httpx.AsyncClient, credential: str) -> str:
        """Best-effort list of usable model names for the 404 message; never raises."""
        try:
            url = keyed_url(self._models_endpoint, encode_credential(credential))
            response = await http.get(url)
            match response.status_code:
                case status if status == HTTP_OK:
                    names = _generation_model_names(response.json())
                case status:
                    logger.warning(MSG_MODEL_LIST_FAILED, status)
                    names = []
        except (MealAnalysisError, httpx.HTTPError, ValueError) as exc:
            logger.warning(MSG_MODEL_LIST_FAILED, type(exc).__name__)
            names = []
        match names:
            case []:
                return MSG_ERR_NO_MODELS
            case _:
                return ", ".join(names)
