from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Mapping, Optional

from .schemas import WidgetConfig

MIN_FIAT_AMOUNT = 10
MAX_FIAT_AMOUNT = 50000
DEFAULT_FIAT_AMOUNT = 100
MIN_WALLET_ADDRESS_LENGTH = 26

FIAT_CURRENCIES = (
    "USD", "EUR", "GBP", "CAD", "AUD", "JPY", "INR",
    "BRL", "MXN", "KRW", "SGD", "HKD", "CHF", "NOK", "SEK",
)

COUNTRY_CODES = (
    "US", "GB", "CA", "AU", "DE", "FR", "IT", "ES",
    "NL", "IN", "BR", "MX", "JP", "KR", "SG", "HK",
)

# network -> display name and tokens offered by the form (first one is the default)
NETWORKS: Dict[str, Dict[str, Any]] = {
    "ethereum": {"name": "Ethereum", "tokens": ["ETH", "USDC", "USDT", "DAI", "WBTC", "UNI", "LINK", "AAVE"]},
    "polygon": {"name": "Polygon", "tokens": ["MATIC", "USDC", "USDT", "DAI", "WETH"]},
    "bsc": {"name": "BSC", "tokens": ["BNB", "USDT", "BUSD", "CAKE", "ADA"]},
    "arbitrum": {"name": "Arbitrum One", "tokens": ["ETH", "USDC", "USDT", "ARB", "GMX"]},
    "optimism": {"name": "Optimism", "tokens": ["ETH", "USDC", "USDT", "OP"]},
    "avalanche": {"name": "Avalanche C-Chain", "tokens": ["AVAX", "USDC", "USDT", "JOE"]},
    "solana": {"name": "Solana", "tokens": ["SOL", "USDC", "RAY", "SRM"]},
    "base": {"name": "Base", "tokens": ["ETH", "USDC", "cbBTC"]},
}

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def clamp_fiat_amount(value: Any) -> Optional[float]:
    """
    Missing or zero amounts fall back to the default, numbers are clamped
    into [MIN_FIAT_AMOUNT, MAX_FIAT_AMOUNT], anything else yields None.
    """
    if value is None or value == "" or value is False:
        return float(DEFAULT_FIAT_AMOUNT)
    if value is True:
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(amount):
        return None
    if amount == 0:
        return float(DEFAULT_FIAT_AMOUNT)
    return max(float(MIN_FIAT_AMOUNT), min(float(MAX_FIAT_AMOUNT), amount))


def _text(value: Any, default: str) -> str:
    if value is None or value == "":
        return default
    return str(value).strip() or default


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def sanitize_widget_config(raw: Mapping[str, Any]) -> WidgetConfig:
    """Applies defaults and clamping to a caller-supplied configuration."""
    return WidgetConfig(
        fiatCurrency=_text(raw.get("fiatCurrency"), "USD"),
        cryptoCurrencyCode=_text(raw.get("cryptoCurrencyCode"), "ETH"),
        fiatAmount=clamp_fiat_amount(raw.get("fiatAmount")),
        network=_text(raw.get("network"), "ethereum"),
        countryCode=_text(raw.get("countryCode"), "US"),
        themeColor=_text(raw.get("themeColor"), "000000"),
        isAutoFillUserData=raw.get("isAutoFillUserData") is not False,
        hideMenu=raw.get("hideMenu") is True,
        exchangeScreenTitle=_text(raw.get("exchangeScreenTitle"), "Buy Crypto"),
        isFeeCalculationHidden=raw.get("isFeeCalculationHidden") is True,
        isDisableCrypto=raw.get("isDisableCrypto") is True,
        disableWalletAddressForm=raw.get("disableWalletAddressForm") is True,
        isSell=raw.get("isSell") is True,
        walletAddress=_optional_text(raw.get("walletAddress")),
        email=_optional_text(raw.get("email")),
    )


def validate_widget_config(config: WidgetConfig) -> List[str]:
    """Returns every rule violation; an empty list means the config is valid."""
    errors: List[str] = []

    if config.fiat_currency not in FIAT_CURRENCIES:
        errors.append("Invalid fiat currency")

    amount = config.fiat_amount
    if amount is None or amount < MIN_FIAT_AMOUNT or amount > MAX_FIAT_AMOUNT:
        errors.append(f"Fiat amount must be between {MIN_FIAT_AMOUNT} and {MAX_FIAT_AMOUNT}")

    if config.network not in NETWORKS:
        errors.append("Invalid network")

    if not config.crypto_currency_code or len(config.crypto_currency_code) < 2:
        errors.append("Invalid crypto currency code")

    if config.country_code not in COUNTRY_CODES:
        errors.append("Invalid country code")

    if config.wallet_address is not None and len(config.wallet_address) < MIN_WALLET_ADDRESS_LENGTH:
        errors.append("Invalid wallet address")

    if config.email is not None and not EMAIL_RE.match(config.email):
        errors.append("Invalid email address")

    return errors
