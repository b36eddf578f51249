def format_currency(amount: float, symbol: str = "$") -> str:
    """Format a float as currency string, e.g. '$1,234.56'."""
    return f"{symbol}{amount:,.2f}"


def format_reminder_amount(amount: float, type_: str, symbol: str = "$") -> str:
    """Payments are money going out (-), receivables money coming in (+)."""
    sign = "-" if type_ == "Payment" else "+"
    return f"{sign}{symbol}{abs(amount):,.2f}"
