from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass
class BookingFigures:
    nights: int
    gross_price: Decimal
    commission: Decimal
    net_price: Decimal
    average_daily_rate: Decimal
    lead_time_days: Optional[int]


def count_nights(check_in: date, check_out: date) -> int:
    return max((check_out - check_in).days, 0)


def lead_time_days(check_in: date, request_date: Optional[date]) -> Optional[int]:
    if request_date is None:
        return None
    return (check_in - request_date).days


def default_commission(gross_price, commission_percentage) -> Decimal:
    return _money(_money(gross_price) * Decimal(str(commission_percentage or 0)) / 100)


def derive_booking_figures(
    check_in: date,
    check_out: date,
    gross_price,
    commission,
    request_date: Optional[date] = None,
) -> BookingFigures:
    """
    Ledger fields that follow from dates, price and commission:
    nights = check_out - check_in, net = gross - commission,
    adr = gross / nights (0 when there are no nights),
    lead time = check_in - request_date when a request date exists.
    """
    nights = count_nights(check_in, check_out)
    gross = _money(gross_price)
    commission = _money(commission)
    adr = _money(gross / nights) if nights > 0 else _money(0)

    return BookingFigures(
        nights=nights,
        gross_price=gross,
        commission=commission,
        net_price=gross - commission,
        average_daily_rate=adr,
        lead_time_days=lead_time_days(check_in, request_date),
    )
