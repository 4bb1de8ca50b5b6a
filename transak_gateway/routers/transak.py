from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger

from ..config import Settings
from ..deps import get_settings, get_transak_client, read_json_object
from ..errors import (
    AuthError,
    GatewayError,
    ValidationError,
    classify_widget_error,
    public_message,
)
from ..schemas import WidgetUrlOut
from ..services.transak import TransakClient
from ..validation import sanitize_widget_config, validate_widget_config

DEFAULT_REFERRER = "http://localhost:3000"

router = APIRouter(prefix="/api/transak", tags=["transak"])


def error_response(status: int, error: str, message: Optional[str] = None,
                   details: Optional[List[str]] = None) -> JSONResponse:
    body: Dict[str, Any] = {"error": error}
    if message is not None:
        body["message"] = message
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status, content=body)


def bearer_token(request: Request) -> str:
    header = request.headers.get("authorization") or ""
    if not header.startswith("Bearer "):
        raise AuthError("Missing or invalid authorization header")
    parts = header.split(" ")
    if len(parts) < 2 or not parts[1]:
        raise AuthError("Missing or invalid authorization header")
    return parts[1]


def referrer_domain(request: Request, settings: Settings) -> str:
    origin = request.headers.get("origin") or request.headers.get("referer")
    if origin:
        return origin
    for allowed in settings.cors_origins:
        if allowed != "*":
            return allowed
    return DEFAULT_REFERRER


# ---------------------------
# Auth
# ---------------------------
@router.post("/auth")
async def auth(
    settings: Settings = Depends(get_settings),
    client: TransakClient = Depends(get_transak_client),
):
    try:
        token = await client.issue_access_token()
    except GatewayError as e:
        logger.error(f"Authentication error: {e}")
        return error_response(500, "Authentication failed", public_message(e, settings))
    except Exception as e:
        logger.exception("Unexpected authentication error")
        return error_response(500, "Authentication failed", public_message(e, settings))
    return token.model_dump()


# ---------------------------
# Widget URL
# ---------------------------
@router.post("/create-widget-url")
async def create_widget_url(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: TransakClient = Depends(get_transak_client),
):
    try:
        access_token = bearer_token(request)
    except AuthError as e:
        return error_response(401, e.message)

    payload = await read_json_object(request)
    config = sanitize_widget_config(payload)
    referrer = referrer_domain(request, settings)

    try:
        settings.require_api_key()
        errors = validate_widget_config(config)
        if errors:
            raise ValidationError(errors)
        result = await client.create_widget_url(access_token, config, referrer)
    except ValidationError as e:
        logger.info(f"Rejected widget configuration: {e.details}")
        return error_response(400, e.message, details=e.details)
    except GatewayError as e:
        logger.error(f"Widget URL creation error: {e}")
        status, error = classify_widget_error(e)
        return error_response(status, error, public_message(e, settings))
    except Exception as e:
        logger.exception("Unexpected widget URL creation error")
        return error_response(500, "Failed to create widget URL", public_message(e, settings))

    out = WidgetUrlOut(
        url=result.url,
        expires_at=result.expires_at,
        session_id=result.session_id,
        config=config.to_payload(),
    )
    return out.model_dump(by_alias=True)


# ---------------------------
# Refresh token
# ---------------------------
@router.post("/refresh-token")
async def refresh_token(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: TransakClient = Depends(get_transak_client),
):
    payload = await read_json_object(request)
    token = payload.get("refresh_token")
    if not token or not isinstance(token, str):
        return error_response(400, "refresh_token is required")

    try:
        refreshed = await client.refresh_access_token(token)
    except GatewayError as e:
        logger.error(f"Token refresh error: {e}")
        return error_response(500, "Token refresh failed", public_message(e, settings))
    except Exception as e:
        logger.exception("Unexpected token refresh error")
        return error_response(500, "Token refresh failed", public_message(e, settings))
    return refreshed.model_dump()
