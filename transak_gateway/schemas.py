from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class AccessTokenOut(BaseModel):
    access_token: str
    expires_in: Optional[Any] = None
    token_type: str = "Bearer"


class RefreshTokenOut(BaseModel):
    access_token: str
    expires_in: Optional[Any] = None
    refresh_token: Optional[str] = None


class WidgetConfig(BaseModel):
    """
    Sanitized widget configuration. Field names follow the provider's
    camelCase on the wire; build instances with
    `validation.sanitize_widget_config` so defaults and clamping apply.
    """
    model_config = ConfigDict(populate_by_name=True)

    fiat_currency: str = Field("USD", alias="fiatCurrency")
    crypto_currency_code: str = Field("ETH", alias="cryptoCurrencyCode")
    # None when the caller sent something that is not a number
    fiat_amount: Optional[float] = Field(100, alias="fiatAmount")
    network: str = "ethereum"
    country_code: str = Field("US", alias="countryCode")
    theme_color: str = Field("000000", alias="themeColor")

    # UI flags
    is_auto_fill_user_data: bool = Field(True, alias="isAutoFillUserData")
    hide_menu: bool = Field(False, alias="hideMenu")
    exchange_screen_title: str = Field("Buy Crypto", alias="exchangeScreenTitle")
    is_fee_calculation_hidden: bool = Field(False, alias="isFeeCalculationHidden")
    is_disable_crypto: bool = Field(False, alias="isDisableCrypto")
    disable_wallet_address_form: bool = Field(False, alias="disableWalletAddressForm")
    is_sell: bool = Field(False, alias="isSell")

    # optional
    wallet_address: Optional[str] = Field(None, alias="walletAddress")
    email: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """camelCase dict without empty optional fields (upstream widgetParams core, echoed back as `config`)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class WidgetUrlResult(BaseModel):
    url: str
    expires_at: Optional[Any] = None
    session_id: Optional[str] = None


class WidgetUrlOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    expires_at: Optional[Any] = None
    session_id: Optional[str] = Field(None, alias="sessionId")
    config: Dict[str, Any]
