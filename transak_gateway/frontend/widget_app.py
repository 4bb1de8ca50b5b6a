# widget_app.py (Flask front-end for the widget gateway)
from __future__ import annotations

import re
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from flask import Flask, render_template, request
from loguru import logger

from ..config import Settings
from ..validation import (
    COUNTRY_CODES,
    DEFAULT_FIAT_AMOUNT,
    FIAT_CURRENCIES,
    NETWORKS,
    clamp_fiat_amount,
)

DEMO_MODE = "demo"
READY = "ready"
IDLE = "idle"
LOADING = "loading"

MAX_TRACKED_CLIENTS = 10000
CLIENT_ID_RE = re.compile(r"^[0-9a-f]{32}$")

# form checkbox -> widget flag
FLAG_FIELDS = (
    "isAutoFillUserData",
    "hideMenu",
    "isFeeCalculationHidden",
    "isDisableCrypto",
    "disableWalletAddressForm",
)

DEFAULT_FORM: Dict[str, Any] = {
    "transactionType": "BUY",
    "fiatCurrency": "USD",
    "cryptoCurrencyCode": "ETH",
    "fiatAmount": DEFAULT_FIAT_AMOUNT,
    "network": "ethereum",
    "walletAddress": "",
    "email": "",
    "countryCode": "US",
    "themeColor": "000000",
    "isAutoFillUserData": True,
    "hideMenu": False,
    "isFeeCalculationHidden": False,
    "isDisableCrypto": False,
    "disableWalletAddressForm": False,
}


class WidgetApiError(Exception):
    pass


@dataclass
class WidgetState:
    status: str = IDLE
    url: Optional[str] = None
    banner: Optional[str] = None
    generation: int = 0
    config: Dict[str, Any] = field(default_factory=dict)
    client_id: str = ""
    # a newer load of the same visitor started before this one finished
    stale: bool = False

    @property
    def is_error(self) -> bool:
        return self.status == DEMO_MODE and bool(self.banner)


def form_to_config(form: Dict[str, Any], previous_network: Optional[str] = None) -> Dict[str, Any]:
    """Normalizes submitted form values into the form state used for rendering and requests."""
    config = dict(DEFAULT_FORM)
    for key in ("transactionType", "fiatCurrency", "cryptoCurrencyCode", "network",
                "walletAddress", "email", "countryCode", "themeColor"):
        value = form.get(key)
        if value is not None:
            config[key] = str(value).strip()

    if config["network"] not in NETWORKS:
        config["network"] = DEFAULT_FORM["network"]
    tokens = NETWORKS[config["network"]]["tokens"]
    # switching network resets the token to the network's first one
    if (previous_network and previous_network != config["network"]) or config["cryptoCurrencyCode"] not in tokens:
        config["cryptoCurrencyCode"] = tokens[0]

    amount = clamp_fiat_amount(form.get("fiatAmount"))
    config["fiatAmount"] = amount if amount is not None else float(DEFAULT_FIAT_AMOUNT)

    for key in FLAG_FIELDS:
        config[key] = form.get(key) in ("on", "true", "1", True)
    if config["transactionType"] not in ("BUY", "SELL"):
        config["transactionType"] = "BUY"
    return config


def build_widget_request(config: Dict[str, Any]) -> Dict[str, Any]:
    """Body for POST /api/transak/create-widget-url."""
    selling = config.get("transactionType") == "SELL"
    body: Dict[str, Any] = {
        "fiatCurrency": config["fiatCurrency"],
        "cryptoCurrencyCode": config["cryptoCurrencyCode"],
        "fiatAmount": config["fiatAmount"],
        "network": config["network"],
        "countryCode": config["countryCode"],
        "themeColor": config["themeColor"],
        "exchangeScreenTitle": "Sell Crypto" if selling else "Buy Crypto",
    }
    for key in FLAG_FIELDS:
        body[key] = bool(config.get(key))
    if config.get("walletAddress"):
        body["walletAddress"] = config["walletAddress"]
    if config.get("email"):
        body["email"] = config["email"]
    if selling:
        body["isSell"] = True
    return body


def _server_error(r: requests.Response, fallback: str) -> str:
    try:
        data = r.json()
    except ValueError:
        return fallback
    if not isinstance(data, dict):
        return fallback
    message = data.get("error") or data.get("message") or fallback
    details: List[str] = data.get("details") or []
    if details:
        message = f"{message}: {'; '.join(details)}"
    return message


class WidgetLoader:
    """
    Runs the auth -> create-widget-url chain against the gateway API.

    Loads are numbered per visitor (client id). A result that finishes after
    a newer load of the same visitor has started is marked stale and never
    becomes that visitor's current widget. Loads of different visitors never
    affect each other; the loader keeps no widget state, only the counters.
    """

    def __init__(self, api_base_url: str, http: Optional[requests.Session] = None, timeout: float = 30.0,
                 max_clients: int = MAX_TRACKED_CLIENTS):
        self.api_base_url = api_base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout
        self.max_clients = max_clients
        self._lock = threading.Lock()
        self._generations: "OrderedDict[str, int]" = OrderedDict()

    def begin(self, client_id: str) -> int:
        with self._lock:
            generation = self._generations.pop(client_id, 0) + 1
            self._generations[client_id] = generation
            # forget the least recently active visitors
            while len(self._generations) > self.max_clients:
                self._generations.popitem(last=False)
            return generation

    def is_current(self, client_id: str, generation: int) -> bool:
        with self._lock:
            return self._generations.get(client_id) == generation

    def get_access_token(self) -> str:
        try:
            r = self.http.post(f"{self.api_base_url}/api/transak/auth", json={}, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Auth error: {e}")
            raise WidgetApiError("API not available - using demo mode") from e
        if r.status_code == 404:
            raise WidgetApiError("API not found - gateway not running")
        if not r.ok:
            raise WidgetApiError(_server_error(r, f"HTTP {r.status_code} - {r.reason}"))
        try:
            token = r.json().get("access_token")
        except (ValueError, AttributeError):
            token = None
        if not token:
            raise WidgetApiError("No access token received from API")
        return token

    def create_widget_url(self, token: str, body: Dict[str, Any]) -> str:
        try:
            r = self.http.post(
                f"{self.api_base_url}/api/transak/create-widget-url",
                json=body,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Widget URL creation error: {e}")
            raise WidgetApiError("API not available - using demo mode") from e
        if r.status_code == 404:
            raise WidgetApiError("Widget URL API not available - using demo mode")
        if not r.ok:
            raise WidgetApiError(_server_error(r, "Failed to create widget URL"))
        try:
            url = r.json().get("url")
        except (ValueError, AttributeError):
            url = None
        if not url:
            raise WidgetApiError("No widget URL received from API")
        return url

    def load(self, client_id: str, config: Dict[str, Any]) -> WidgetState:
        """Runs one chain for `client_id` and returns this load's own state."""
        generation = self.begin(client_id)

        try:
            token = self.get_access_token()
        except WidgetApiError as e:
            state = WidgetState(status=DEMO_MODE, banner=f"Authentication: {e}")
        else:
            try:
                url = self.create_widget_url(token, build_widget_request(config))
            except WidgetApiError as e:
                state = WidgetState(status=DEMO_MODE, banner=f"Widget URL: {e}")
            else:
                state = WidgetState(status=READY, url=url, banner="Production widget loaded successfully!")

        state.client_id = client_id
        state.generation = generation
        state.config = config
        if not self.is_current(client_id, generation):
            logger.info(f"Widget result for client {client_id[:8]} superseded (generation {generation})")
            state.stale = True
        return state


def client_id_from(value: Optional[str]) -> str:
    if value and CLIENT_ID_RE.match(value):
        return value
    return uuid.uuid4().hex


def short_address(address: str) -> str:
    if not address or len(address) <= 10:
        return address or ""
    return f"{address[:6]}...{address[-4:]}"


def create_frontend_app(settings: Optional[Settings] = None, http: Optional[requests.Session] = None) -> Flask:
    settings = settings or Settings.from_env()
    app = Flask(__name__)
    loader = WidgetLoader(settings.widget_api_base_url, http=http, timeout=settings.http_timeout)
    app.extensions["widget_loader"] = loader
    app.jinja_env.filters["short_address"] = short_address

    def render(config: Dict[str, Any], state: WidgetState):
        return render_template(
            "widget.html",
            config=config,
            state=state,
            networks=NETWORKS,
            fiat_currencies=FIAT_CURRENCIES,
            country_codes=COUNTRY_CODES,
            tokens=NETWORKS[config["network"]]["tokens"],
        )

    @app.route("/", methods=["GET"])
    def index():
        config = dict(DEFAULT_FORM)
        return render(config, WidgetState(status=DEMO_MODE, config=config, client_id=client_id_from(None)))

    @app.route("/", methods=["POST"])
    def submit():
        config = form_to_config(request.form.to_dict(), previous_network=request.form.get("previousNetwork"))
        state = loader.load(client_id_from(request.form.get("clientId")), config)
        return render(config, state)

    return app


if __name__ == "__main__":
    create_frontend_app().run(host="0.0.0.0", port=5000, debug=True)
