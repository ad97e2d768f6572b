"""
Localization Service

Formats offer prices for the shopper's locale. Stands in for the host's
i18n ``formatCurrency`` when the widget runs against the storefront API
directly.
"""
from decimal import Decimal
from typing import Union

from insurance_offer.services.money import format_amount, to_decimal

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "CAD": "$",
    "AUD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "KRW": "₩",
    "INR": "₹",
    "RUB": "₽",
}

# Currencies without minor units
INTEGER_CURRENCIES = frozenset({"JPY", "KRW"})

# Currencies written before the amount
PREFIX_CURRENCIES = frozenset({"USD", "CAD", "AUD", "GBP", "JPY", "KRW", "INR"})

# Locales that use "1.234,56"
COMMA_DECIMAL_LANGUAGES = frozenset({"de", "fr", "es", "it", "nl", "pt", "ru", "tr"})


class LocalizationService:
    """Currency formatting for one shopper locale."""

    def __init__(self, currency: str = "USD", locale: str = "en"):
        self.currency = currency.upper()
        self.locale = locale

    @property
    def language(self) -> str:
        # "fr-CA" -> "fr"
        return self.locale.split("-")[0].lower()

    def format_currency(self, amount: Union[str, int, float, Decimal]) -> str:
        """
        Format a decimal amount as a currency string.

        Args:
            amount: Amount in major units, e.g. "4.99"

        Returns:
            Formatted string such as "$4.99" or "4,99 €"
        """
        decimal_amount = to_decimal(amount)
        symbol = CURRENCY_SYMBOLS.get(self.currency, self.currency)
        to_int = self.currency in INTEGER_CURRENCIES

        if self.language in COMMA_DECIMAL_LANGUAGES:
            thousands = " " if self.language in ("fr", "ru") else "."
            formatted = format_amount(decimal_amount, to_int=to_int, thousands=thousands, decimal_point=",")
        else:
            formatted = format_amount(decimal_amount, to_int=to_int)

        if self.currency in PREFIX_CURRENCIES and self.language not in COMMA_DECIMAL_LANGUAGES:
            return f"{symbol}{formatted}"
        return f"{formatted} {symbol}"
