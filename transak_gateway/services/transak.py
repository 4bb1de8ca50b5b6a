from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from ..config import Settings, mask_secret
from ..errors import RemoteError
from ..schemas import AccessTokenOut, RefreshTokenOut, WidgetConfig, WidgetUrlResult
from .http import forward_json


class TransakClient:
    """
    Client for the Transak API gateway:
    - /api/v1/auth/token -> access token (api_key + api_secret)
    - /api/v1/auth/refresh-token -> new access token
    - /api/v1/widgets/create-url -> widget URL, requires Authorization: Bearer <token>
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.base_url = settings.transak_base_url.rstrip("/")
        self.transport = transport

    async def _post(self, path: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Any:
        return await forward_json(
            f"{self.base_url}{path}",
            "POST",
            payload,
            headers,
            timeout=self.settings.http_timeout,
            transport=self.transport,
        )

    async def issue_access_token(self) -> AccessTokenOut:
        api_key, api_secret = self.settings.require_credentials()
        logger.info(f"Authenticating with Transak API ({self.settings.environment}), key={mask_secret(api_key)}")

        data = await self._post("/api/v1/auth/token", {"api_key": api_key, "api_secret": api_secret})
        if not isinstance(data, dict) or not data.get("access_token"):
            raise RemoteError(None, "Invalid response from Transak API - no access token received")

        logger.info("Authentication successful")
        return AccessTokenOut(
            access_token=data["access_token"],
            expires_in=data.get("expires_in"),
            token_type=data.get("token_type") or "Bearer",
        )

    async def refresh_access_token(self, refresh_token: str) -> RefreshTokenOut:
        api_key = self.settings.require_api_key()
        data = await self._post(
            "/api/v1/auth/refresh-token",
            {"api_key": api_key, "refresh_token": refresh_token},
        )
        if not isinstance(data, dict) or not data.get("access_token"):
            raise RemoteError(None, "Invalid response from Transak API on token refresh")
        return RefreshTokenOut(
            access_token=data["access_token"],
            expires_in=data.get("expires_in"),
            refresh_token=data.get("refresh_token"),
        )

    async def create_widget_url(self, access_token: str, config: WidgetConfig, referrer_domain: str) -> WidgetUrlResult:
        widget_params = {
            "apiKey": self.settings.require_api_key(),
            "referrerDomain": referrer_domain,
            "environment": self.settings.environment,
        }
        widget_params.update(config.to_payload())

        logger.info(
            f"Creating widget URL for {config.fiat_currency}/{config.crypto_currency_code} "
            f"on {config.network} (referrerDomain={referrer_domain})"
        )
        data = await self._post(
            "/api/v1/widgets/create-url",
            {"widgetParams": widget_params},
            {"Authorization": f"Bearer {access_token}"},
        )

        # documented shape is {"widgetUrl": ...}; some gateway versions wrap it in "data"
        body = data.get("data") if isinstance(data, dict) and isinstance(data.get("data"), dict) else data
        url = None
        if isinstance(body, dict):
            url = body.get("widgetUrl") or body.get("url")
        if not url:
            raise RemoteError(None, "Invalid response from Transak API - no widgetUrl received")

        logger.info("Widget URL created successfully")
        return WidgetUrlResult(
            url=url,
            expires_at=body.get("expires_at"),
            session_id=body.get("sessionId"),
        )
