from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")


def qround(d: Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(amount: float) -> str:
    """Render an amount fixed to 2 decimals, e.g. 50 -> "50.00"."""
    return str(qround(Decimal(str(amount))))


def normalise_name(name: str | None) -> str:
    return (name or "").strip()
