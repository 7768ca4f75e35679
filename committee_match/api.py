"""FastAPI app exposing the committee matching endpoint.

One endpoint validates the submitted member profile and committee catalog,
runs a schema-constrained completion and relays the JSON result. Every
response carries the permissive CORS origin header so the onboarding form
can call it from any site.
"""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ai.completion import CompletionClient, OpenAICompleter
from .config import Settings, get_settings
from .logging_config import setup_logging
from .models import ErrorResponse, HealthResponse, MatchRequest, MatchResult
from .pipelines.matching import MatchingError, match_member_to_committees

logger = logging.getLogger(__name__)

MATCH_PATHS = ("/match-committees", "/.netlify/functions/match-committees")

# Registered explicitly so unsupported verbs get our JSON 405 body.
ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class ConfigurationError(Exception):
    """Raised when the server is missing required configuration."""
    pass


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown logic."""
    # Startup
    setup_logging(get_settings().logging)
    logger.info("Application starting up")

    yield

    # Shutdown
    logger.info("Application shutting down")


app = FastAPI(
    title="Committee Match",
    version="0.1.0",
    description="Match new members to committees with schema-constrained completions",
    lifespan=lifespan,
)


def _settings_for(request: Request) -> Settings:
    return getattr(request.state, "settings", None) or get_settings()


def json_response(body: ErrorResponse, status_code: int, settings: Settings) -> JSONResponse:
    """JSON error response with the CORS origin header."""
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers={"Access-Control-Allow-Origin": settings.cors.allow_origin},
    )


# Completers built per Settings instance; the settings object is held so its id stays unique.
_completers: dict[int, tuple[Settings, OpenAICompleter]] = {}


def get_completion_client(settings: Settings = Depends(get_settings)) -> CompletionClient | None:
    """Completion client dependency; None when no API key is configured."""
    api_key = settings.openai_api_key
    if not api_key:
        return None
    cached = _completers.get(id(settings))
    if cached is None:
        completer = OpenAICompleter(
            api_key,
            model=settings.openai.model,
            temperature=settings.openai.temperature,
            base_url=settings.openai.base_url,
        )
        cached = _completers[id(settings)] = (settings, completer)
    return cached[1]


# Exception handlers
@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """Handle missing server configuration."""
    logger.error(f"Configuration error: {exc}")
    return json_response(
        ErrorResponse(error=str(exc)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        _settings_for(request),
    )


@app.exception_handler(MatchingError)
async def matching_error_handler(request: Request, exc: MatchingError):
    """Handle completion failures."""
    return json_response(
        ErrorResponse(error="AI match failed", detail=exc.detail),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        _settings_for(request),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Render router-level errors (404, 405) in the same JSON shape."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = "Method not allowed"
    else:
        message = str(exc.detail)
    return json_response(ErrorResponse(error=message), exc.status_code, _settings_for(request))


async def match_committees(
    request: Request,
    settings: Settings = Depends(get_settings),
    completer: CompletionClient | None = Depends(get_completion_client),
) -> Response:
    """Match one member to the best committees of the supplied catalog.

    Checks, in order: preflight/method, JSON body, member and committees
    shape, then the completion credential. Only then is the
    completion service called, exactly once.
    """
    request.state.settings = settings
    cors = settings.cors

    if request.method == "OPTIONS":
        return Response(
            status_code=status.HTTP_204_NO_CONTENT,
            headers={
                "Access-Control-Allow-Origin": cors.allow_origin,
                "Access-Control-Allow-Headers": cors.allow_headers,
                "Access-Control-Allow-Methods": cors.allow_methods,
            },
        )

    if request.method != "POST":
        return json_response(
            ErrorResponse(error="Method not allowed"),
            status.HTTP_405_METHOD_NOT_ALLOWED,
            settings,
        )

    try:
        payload = json.loads(await request.body())
    except ValueError:
        return json_response(ErrorResponse(error="Invalid JSON"), status.HTTP_400_BAD_REQUEST, settings)

    if (
        not isinstance(payload, dict)
        or not isinstance(payload.get("member"), dict)
        or not isinstance(payload.get("committees"), list)
    ):
        return json_response(
            ErrorResponse(error="Missing member or committees"),
            status.HTTP_400_BAD_REQUEST,
            settings,
        )

    match_request = MatchRequest.model_validate(payload)

    if completer is None:
        raise ConfigurationError("Server misconfigured: missing OPENAI_API_KEY")

    body = await match_member_to_committees(completer, match_request)

    return Response(
        content=body,
        status_code=status.HTTP_200_OK,
        media_type="application/json",
        headers={"Access-Control-Allow-Origin": cors.allow_origin},
    )


for path in MATCH_PATHS:
    app.add_api_route(
        path,
        match_committees,
        methods=ROUTE_METHODS,
        responses={
            200: {"model": MatchResult},
            400: {"model": ErrorResponse},
            405: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )


@app.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", version=settings.version)


@app.get("/")
async def root(settings: Settings = Depends(get_settings)):
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.version,
        "endpoints": {
            "health": "/health",
            "match_committees": MATCH_PATHS[0],
            "docs": "/docs",
        },
    }
