from typing import Any, Dict

from fastapi import Depends, Request
from loguru import logger

from .config import Settings
from .services.transak import TransakClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_transak_client(settings: Settings = Depends(get_settings)) -> TransakClient:
    return TransakClient(settings)


async def read_json_object(request: Request) -> Dict[str, Any]:
    """Request body as a dict; empty, malformed or non-object bodies become {}."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = await request.json()
    except ValueError:
        logger.warning(f"Ignoring malformed JSON body on {request.url.path}")
        return {}
    return data if isinstance(data, dict) else {}
