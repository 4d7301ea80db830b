"""
Currency normalization to the home currency (USD) using a fixed rate table.
"""

import logging

from booking_engine.models import PriceQuote

logger = logging.getLogger(__name__)


HOME_CURRENCY = "USD"

# Units of USD per one unit of the foreign currency.
# Gulf currencies and HKD are pegged; the rest are periodic snapshots.
RATES_TO_HOME = {
    "USD": 1.0,
    # Gulf (pegged)
    "AED": 0.2723,
    "SAR": 0.2667,
    "QAR": 0.2747,
    "BHD": 2.6525,
    "OMR": 2.5974,
    "KWD": 3.26,
    # Major
    "EUR": 1.08,
    "GBP": 1.27,
    "CAD": 0.74,
    "AUD": 0.65,
    "CHF": 1.12,
    "JPY": 0.0067,
    # Asia
    "INR": 0.012,
    "CNY": 0.14,
    "SGD": 0.75,
    "HKD": 0.1282,
    "KRW": 0.00076,
    "THB": 0.029,
    "MYR": 0.22,
    "PHP": 0.018,
    "IDR": 0.000063,
    "VND": 0.00004,
    "TWD": 0.031,
    # Other
    "MXN": 0.058,
    "BRL": 0.20,
    "NZD": 0.60,
    "ZAR": 0.054,
}


def _code(currency_code: str) -> str:
    return (currency_code or HOME_CURRENCY).strip().upper()


def exchange_rate(currency_code: str) -> float:
    """USD per unit of `currency_code`; unknown codes fall back to 1.0."""
    code = _code(currency_code)
    rate = RATES_TO_HOME.get(code)
    if rate is None:
        logger.warning("Unknown currency %r; treating amount as %s", currency_code, HOME_CURRENCY)
        return 1.0
    return rate


def to_home_currency(amount: float, currency_code: str) -> float:
    """
    Convert an amount to the home currency.

    Unknown codes are treated as already being in the home currency
    (factor 1.0) rather than failing.

    Example:
        >>> to_home_currency(100.0, "EUR")
        108.0
    """
    return amount * exchange_rate(currency_code)


def is_foreign_currency(currency_code: str) -> bool:
    """True when converting this code involves an exchange rate."""
    code = _code(currency_code)
    return code != HOME_CURRENCY and code in RATES_TO_HOME


def normalize_quote(quote: PriceQuote) -> tuple[float, bool]:
    """Return (home-currency amount, whether a conversion was involved)."""
    money = quote.money
    return to_home_currency(money.amount, money.currency), is_foreign_currency(money.currency)
