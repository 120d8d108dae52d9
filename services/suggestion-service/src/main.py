"""
Suggestion Service turns a user phrase into a short list of emoji suggestions
using the configured AI provider (or the offline keyword table in mock mode).
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

SRC_DIR = Path(__file__).resolve().parent
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

SERVICES_ROOT = SRC_DIR.parents[1]
if str(SERVICES_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICES_ROOT))

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from shared.observability.telemetry import (
    CORRELATION_ID_HEADER,
    bind_request_context,
    ensure_request_id,
    reset_request_context,
    setup_telemetry,
)
from shared.provider_settings import ProviderConfig, ProviderSettingsError, load_provider_config

from errors import (
    ContentBlocked,
    InvalidInput,
    MalformedResponse,
    MissingCredential,
    NoValidSuggestions,
    ProviderConnectionError,
    ProviderHttpError,
    SuggestionError,
    UnknownProvider,
)
from suggestion_service import SuggestionService, validate_config

SERVICE_NAME = "suggestion-service"

logger = logging.getLogger(__name__)

app = FastAPI(title="Suggestion Service")
setup_telemetry(app, service_name=SERVICE_NAME)

ERROR_STATUS_CODES: Dict[type, int] = {
    InvalidInput: 400,
    ContentBlocked: 422,
    UnknownProvider: 500,
    ProviderHttpError: 502,
    ProviderConnectionError: 502,
    MalformedResponse: 502,
    NoValidSuggestions: 502,
    MissingCredential: 503,
}

try:
    PROVIDER_CONFIG = load_provider_config()
except ProviderSettingsError as exc:
    logger.error("Failed to load provider settings: %s", exc)
    raise


def _initialize_suggestion_service(
    config: ProviderConfig,
) -> Tuple[Optional[SuggestionService], Optional[UnknownProvider]]:
    # An unsupported provider keeps the app up so /config can still report it.
    try:
        return SuggestionService(config), None
    except UnknownProvider as exc:
        logger.error("Unsupported AI provider '%s'", config.provider)
        return None, exc


SUGGESTION_SERVICE, PROVIDER_ERROR = _initialize_suggestion_service(PROVIDER_CONFIG)


def reload_suggestion_service_for_tests() -> None:
    """
    Refresh provider wiring after tests mutate environment variables.
    """

    global PROVIDER_CONFIG
    global SUGGESTION_SERVICE
    global PROVIDER_ERROR

    PROVIDER_CONFIG = load_provider_config()
    SUGGESTION_SERVICE, PROVIDER_ERROR = _initialize_suggestion_service(PROVIDER_CONFIG)


class SuggestRequestModel(BaseModel):
    # Typed loosely so non-string phrases reach the service's own validation.
    phrase: Any = None


class SuggestionModel(BaseModel):
    emoji: str
    reason: str


class SuggestResponseModel(BaseModel):
    provider: str
    mock_mode: bool
    suggestions: List[SuggestionModel]


class ConfigStatusModel(BaseModel):
    provider: str
    openai_configured: bool
    gemini_configured: bool
    mock_mode: bool


def error_response(status_code: int, error_code: str, details: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error_code, "details": details},
    )


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = ensure_request_id(request)
    token = bind_request_context(request_id)
    try:
        response = await call_next(request)
        response.headers.setdefault(CORRELATION_ID_HEADER, request_id)
        return response
    finally:
        reset_request_context(token)


@app.exception_handler(SuggestionError)
async def suggestion_error_handler(request: Request, exc: SuggestionError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    return error_response(status_code, exc.code, str(exc))


@app.on_event("shutdown")
async def on_shutdown() -> None:
    """Close pooled upstream connections."""
    if SUGGESTION_SERVICE is not None:
        await SUGGESTION_SERVICE.aclose()


@app.get("/health")
def health_check() -> dict:
    """
    Report Suggestion Service readiness; expects no payload.
    Returns a static status document for load balancers and uptime checks.
    """
    return {"status": "ok", "service": SERVICE_NAME}


@app.get("/config", response_model=ConfigStatusModel)
def config_status() -> ConfigStatusModel:
    """
    Report which provider is active and whether each provider's credential is present.
    Never exposes the credentials themselves.
    """
    return ConfigStatusModel(**validate_config(PROVIDER_CONFIG).to_dict())


@app.post("/suggestions", response_model=SuggestResponseModel)
async def suggest_emojis(payload: SuggestRequestModel) -> SuggestResponseModel:
    """
    Suggest emojis for the phrase in the request body.
    Expects `{"phrase": str}`; returns the provider name plus the ordered suggestions.
    Typed failures are rendered as `{"error": <code>, "details": <message>}`.
    """
    if SUGGESTION_SERVICE is None:
        raise UnknownProvider(str(PROVIDER_ERROR), provider=PROVIDER_CONFIG.provider)
    suggestions = await SUGGESTION_SERVICE.get_suggestions(payload.phrase)
    return SuggestResponseModel(
        provider=SUGGESTION_SERVICE.provider_name,
        mock_mode=PROVIDER_CONFIG.mock_mode,
        suggestions=[SuggestionModel(**item) for item in suggestions.to_list()],
    )
