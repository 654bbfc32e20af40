from typing import Any, Dict, List

CURRENCIES_LIST: List[Dict[str, str]] = [
    {"value": "USD", "label": "USD - United States Dollar"},
    {"value": "EUR", "label": "EUR - Euro"},
    {"value": "GBP", "label": "GBP - British Pound Sterling"},
    {"value": "JPY", "label": "JPY - Japanese Yen"},
    {"value": "CAD", "label": "CAD - Canadian Dollar"},
    {"value": "AUD", "label": "AUD - Australian Dollar"},
    {"value": "INR", "label": "INR - Indian Rupee"},
]

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "CA$",
    "AUD": "A$",
    "INR": "₹",
}

SUPPORTED_CURRENCIES = tuple(CURRENCY_SYMBOLS)


def format_currency(amount: Any, currency_code: str) -> str:
    """
    Formats an amount as e.g. "$1,234.50" (always two decimals).
    A value that is not a number is formatted as zero; unknown codes are used as their own prefix.
    """
    try:
        numeric_amount = float(amount)
    except (TypeError, ValueError):
        numeric_amount = 0.0
    if numeric_amount != numeric_amount:  # NaN
        numeric_amount = 0.0

    symbol = CURRENCY_SYMBOLS.get(currency_code, f"{currency_code} ")
    sign = "-" if numeric_amount < 0 else ""
    return f"{sign}{symbol}{abs(numeric_amount):,.2f}"
