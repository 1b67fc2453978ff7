def format_cents(amount_cents: int, currency_code: str | None = None) -> str:
    """Format integer minor units as a currency string, e.g. '12.34 EUR' or '$12.34'."""
    sign = "-" if amount_cents < 0 else ""
    whole, cents = divmod(abs(amount_cents), 100)
    if currency_code:
        return f"{sign}{whole:,}.{cents:02d} {currency_code}"
    return f"{sign}${whole:,}.{cents:02d}"


def round_half_up_mean(values: list[int]) -> int:
    """Arithmetic mean of non-negative integers, rounded half-up to an integer."""
    if not values:
        return 0
    n = len(values)
    return (2 * sum(values) + n) // (2 * n)
