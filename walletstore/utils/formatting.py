import os
from typing import Optional


def _format_number(value: float, decimals: int) -> str:
    fmt = f"{value:.{decimals}f}"
    if "." in fmt:
        fmt = fmt.rstrip("0").rstrip(".")
    return fmt


def format_amount(amount: Optional[float], unit: Optional[str] = None) -> str:
    """Format an amount for display, e.g. ``1.5 XZC`` or ``250 mXZC``."""
    if amount is None:
        amount = 0.0

    try:
        value = float(amount)
    except (TypeError, ValueError):
        value = 0.0

    base_unit = unit or os.getenv("WALLETSTORE_CURRENCY_UNIT", "XZC")
    decimals = int(os.getenv("WALLETSTORE_AMOUNT_DECIMALS", "8"))
    if decimals < 0:
        decimals = 0

    abs_value = abs(value)
    if abs_value == 0 or abs_value >= 1:
        return f"{_format_number(value, decimals)} {base_unit}"

    for scale, prefix in ((1e-3, "m"), (1e-6, "μ")):
        if abs_value >= scale:
            return f"{_format_number(value / scale, 4)} {prefix}{base_unit}"

    return f"{_format_number(value, decimals)} {base_unit}"


def format_timestamp_ms(value: Optional[int]) -> str:
    """Render an epoch-millisecond timestamp as UTC text."""
    if not value:
        return "-"
    from datetime import datetime, timezone
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
