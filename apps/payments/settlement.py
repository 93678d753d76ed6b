"""
Settlement arithmetic for consultation payments.

Pure functions on Decimal, no database access. A booking total is the
consultation fee plus a 10% service fee; on completion the platform keeps a
20% commission of the consultation fee and the rest is paid to the provider.

Values are kept at full precision and only rounded to cents with to_money()
when they are persisted or displayed.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Union

Number = Union[Decimal, int, str]

SERVICE_FEE_MULTIPLIER = Decimal('1.1')
SERVICE_FEE_RATE_PERCENT = 10
COMMISSION_RATE = Decimal('0.20')

CENTS = Decimal('0.01')
MINUTES_PER_HOUR = Decimal(60)


def _decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_money(value: Number) -> Decimal:
    """Round to cents, half up"""
    return _decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def total_from_base(base: Number) -> Decimal:
    """Amount charged to the customer for a given consultation fee"""
    return _decimal(base) * SERVICE_FEE_MULTIPLIER


def consultation_fee_from_total(total: Number) -> Decimal:
    """Consultation fee contained in a charged total"""
    return _decimal(total) / SERVICE_FEE_MULTIPLIER


def service_fee(total: Number) -> Decimal:
    total = _decimal(total)
    return total - consultation_fee_from_total(total)


def commission(consultation_fee: Number) -> Decimal:
    """Platform share of a completed consultation"""
    return _decimal(consultation_fee) * COMMISSION_RATE


def provider_net(consultation_fee: Number) -> Decimal:
    """
    Provider share of a completed consultation.

    Derived from commission() so that commission + net is exactly the fee.
    """
    consultation_fee = _decimal(consultation_fee)
    return consultation_fee - commission(consultation_fee)


def customer_cancel_refund(total: Number) -> Decimal:
    """Refund for a customer cancellation: the service fee is forfeited"""
    return to_money(consultation_fee_from_total(total))


def full_refund(total: Number) -> Decimal:
    """Refund for provider rejection or expiry"""
    return _decimal(total)


def price_for_duration(rate: Number, minutes: int) -> Decimal:
    """Total charged for a session of `minutes` at an hourly `rate`"""
    base = Decimal(minutes) / MINUTES_PER_HOUR * _decimal(rate)
    return total_from_base(base)


def fee_breakdown(total: Number, refund_amount: Number = 0) -> Dict[str, Decimal]:
    """
    Display breakdown of an invoice total, rounded to cents.
    """
    total = _decimal(total)
    return {
        'consultation_fee': to_money(consultation_fee_from_total(total)),
        'service_fee': to_money(service_fee(total)),
        'total': to_money(total),
        'refund_amount': to_money(refund_amount or 0),
    }
