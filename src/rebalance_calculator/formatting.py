"""Display formatting for amounts produced by the calculator"""


def format_currency(value: float) -> str:
    """Format as US dollars, e.g. 1234.5 -> '$1,234.50', -3 -> '-$3.00'."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percentage(value: float, decimals: int = 2) -> str:
    """Format a fraction as a percentage (0.05 -> '5.00%')."""
    return f"{value * 100:.{decimals}f}%"


def format_percentage_value(value: float, decimals: int = 2) -> str:
    """Format a value already expressed in percent (5 -> '5.00%')."""
    return f"{value:.{decimals}f}%"


def format_quantity(quantity: float) -> str:
    """Whole quantities print without decimals, fractional ones with up to 4 places."""
    if float(quantity).is_integer():
        return str(int(quantity))
    return f"{quantity:.4f}".rstrip('0').rstrip('.')
