import pytest

from transak_gateway.validation import (
    COUNTRY_CODES,
    FIAT_CURRENCIES,
    NETWORKS,
    clamp_fiat_amount,
    sanitize_widget_config,
    validate_widget_config,
)


def test_empty_config_gets_defaults():
    config = sanitize_widget_config({})
    assert config.fiat_currency == "USD"
    assert config.crypto_currency_code == "ETH"
    assert config.fiat_amount == 100
    assert config.network == "ethereum"
    assert config.country_code == "US"
    assert config.theme_color == "000000"
    assert config.is_auto_fill_user_data is True
    assert config.hide_menu is False
    assert config.is_sell is False
    assert config.exchange_screen_title == "Buy Crypto"
    assert validate_widget_config(config) == []


@pytest.mark.parametrize("fiat", FIAT_CURRENCIES)
def test_every_fiat_currency_validates(fiat):
    assert validate_widget_config(sanitize_widget_config({"fiatCurrency": fiat})) == []


@pytest.mark.parametrize("network", list(NETWORKS))
def test_every_network_validates(network):
    assert validate_widget_config(sanitize_widget_config({"network": network})) == []


@pytest.mark.parametrize("country", COUNTRY_CODES)
def test_every_country_validates(country):
    assert validate_widget_config(sanitize_widget_config({"countryCode": country})) == []


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 100.0),
        (0, 100.0),
        ("", 100.0),
        (5, 10.0),
        (-20, 10.0),
        (75000, 50000.0),
        (250, 250.0),
        ("300", 300.0),
        ("abc", None),
        (float("nan"), None),
    ],
)
def test_clamp_fiat_amount(raw, expected):
    assert clamp_fiat_amount(raw) == expected


def test_out_of_range_amount_is_clamped_not_rejected():
    config = sanitize_widget_config({"fiatAmount": 999999})
    assert config.fiat_amount == 50000
    assert validate_widget_config(config) == []


def test_non_numeric_amount_is_rejected():
    errors = validate_widget_config(sanitize_widget_config({"fiatAmount": "lots"}))
    assert errors == ["Fiat amount must be between 10 and 50000"]


def test_all_violations_are_collected():
    config = sanitize_widget_config({
        "fiatCurrency": "XYZ",
        "network": "dogechain",
        "countryCode": "ZZ",
    })
    assert validate_widget_config(config) == [
        "Invalid fiat currency",
        "Invalid network",
        "Invalid country code",
    ]


def test_short_crypto_code_is_rejected():
    errors = validate_widget_config(sanitize_widget_config({"cryptoCurrencyCode": "E"}))
    assert errors == ["Invalid crypto currency code"]


def test_wallet_and_email_checked_only_when_present():
    ok = sanitize_widget_config({
        "walletAddress": "0x52908400098527886E0F7030069857D2E4169EE7",
        "email": "user@example.com",
    })
    assert validate_widget_config(ok) == []

    bad = sanitize_widget_config({"walletAddress": "0x1234", "email": "not-an-email"})
    assert validate_widget_config(bad) == ["Invalid wallet address", "Invalid email address"]

    blank = sanitize_widget_config({"walletAddress": "", "email": "   "})
    assert blank.wallet_address is None
    assert blank.email is None


def test_flags_follow_explicit_booleans():
    config = sanitize_widget_config({
        "isAutoFillUserData": False,
        "hideMenu": "yes",
        "isSell": True,
        "isFeeCalculationHidden": True,
    })
    assert config.is_auto_fill_user_data is False
    assert config.hide_menu is False
    assert config.is_sell is True
    assert config.is_fee_calculation_hidden is True


def test_payload_uses_wire_names_and_drops_empty_optionals():
    payload = sanitize_widget_config({"fiatCurrency": "EUR", "walletAddress": ""}).to_payload()
    assert payload["fiatCurrency"] == "EUR"
    assert payload["cryptoCurrencyCode"] == "ETH"
    assert "walletAddress" not in payload
    assert "email" not in payload
    assert payload["isSell"] is False
