import math
import re
from collections.abc import Iterable
from decimal import Decimal

from spot_deals.providers.provider_types import PriceRecord, RankedDeal

from .utils import setup_logger

logger = setup_logger(name="core.deal_filter")

DEFAULT_MIN_SAVINGS_RATE = 50

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_savings_rate(value: str) -> int | None:
    """
    Parse a percentage string such as "60%" into an integer.

    One trailing "%" is stripped; the rest must be a plain integer.
    Returns None when the value does not parse.
    """
    if value.endswith("%"):
        value = value[:-1]
    if not _INTEGER_RE.fullmatch(value):
        return None
    return int(value)


def parse_spot_price(value: str) -> Decimal | None:
    """
    Parse a decimal price string such as "0.30".

    Only plain decimal literals are accepted (no whitespace, underscores,
    NaN or Infinity). Returns None when the value does not parse or lies
    outside the float range, so every accepted price renders as a finite
    JSON number.
    """
    if not _DECIMAL_RE.fullmatch(value):
        return None
    try:
        price = Decimal(value)
    except ArithmeticError:
        return None
    if not math.isfinite(float(price)):
        return None
    return price


def select_deals(
    records: Iterable[PriceRecord], min_savings_rate: int = DEFAULT_MIN_SAVINGS_RATE
) -> list[RankedDeal]:
    """
    Keep the offers whose savings rate strictly exceeds ``min_savings_rate``
    and rank them by price per vCPU, cheapest first.

    Offers with an unparsable savings rate or a non-positive vCPU count are
    dropped. An unparsable spot price counts as zero, so such an offer ranks
    first.

    The sort is stable: offers with the same price per vCPU keep their input
    order.
    """
    deals = []
    for record in records:
        savings_rate = parse_savings_rate(record.spot_saving_rate)
        if savings_rate is None or savings_rate <= min_savings_rate:
            continue
        if record.vcpus <= 0:
            logger.debug(f"Skipping {record.instance_type}: non-positive vCPU count {record.vcpus}")
            continue

        price = parse_spot_price(record.spot_price)
        if price is None:
            # TODO: drop offers with an unparsable price once the upstream confirms zero is never intended
            logger.warning(
                f"Unparsable spot price {record.spot_price!r} for {record.instance_type}, ranking it as 0"
            )
            price = Decimal(0)

        deals.append(
            RankedDeal(
                record=record,
                savings_rate=savings_rate,
                price=price,
                price_per_unit=price / record.vcpus,
            )
        )

    deals.sort(key=lambda deal: deal.price_per_unit)
    return deals
