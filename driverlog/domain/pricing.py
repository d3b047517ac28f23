"""
Pricing Engine.

Pure functions turning entry inputs into a monetary total. Nothing here does
I/O or raises on bad numeric input: absent or unparsable counts price as zero.
"""

import re
from decimal import MAX_PREC, Decimal, localcontext
from enum import IntEnum
from typing import Any, NamedTuple

CENTS = Decimal("0.01")

PARCEL_RATE = Decimal("1.00")
COLLECTION_RATE = Decimal("0.80")

SINGLE_ROUTE_RATE = Decimal("180.00")
LOW_VOLUME_RATE = Decimal("260.00")
MID_VOLUME_RATE = Decimal("300.00")
HIGH_VOLUME_RATE = Decimal("360.00")

# Largest parcel or collection count a record may hold
MAX_COUNT = 100_000

# Inclusive bounds of the middle two-route tier
MID_VOLUME_MIN = 150
MID_VOLUME_MAX = 250

TIER_SINGLE_ROUTE = "Etapa 1 (1 ID)"
TIER_LOW_VOLUME = "Etapa 2 (<150 pcts)"
TIER_MID_VOLUME = "Etapa 3 (150-250 pcts)"
TIER_HIGH_VOLUME = "Etapa 4 (>250 pcts)"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class RouteCount(IntEnum):
    """Number of route ids worked on a daily-rate day. Only 1 or 2 exist."""
    SINGLE = 1
    DOUBLE = 2


class DailyRateQuote(NamedTuple):
    amount: Decimal
    tier_label: str


def coerce_count(value: Any) -> int:
    """
    Read a count the way a numeric form field would.

    Leading integer digits win ("12abc" -> 12, "3.7" -> 3). Anything without
    them (None, "", "abc") is 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        # More digits than int() accepts
        return 0


def compute_standard(parcel_count: Any, collection_count: Any) -> Decimal:
    """Per-item pay: every parcel at 1.00, every collection at 0.80."""
    parcels = coerce_count(parcel_count)
    collections = coerce_count(collection_count)
    # Exact for counts of any size
    with localcontext() as ctx:
        ctx.prec = MAX_PREC
        amount = parcels * PARCEL_RATE + collections * COLLECTION_RATE
        return amount.quantize(CENTS)


def compute_daily_rate(id_count: RouteCount, parcel_count: Any) -> DailyRateQuote:
    """
    Flat daily pay keyed by how many route ids were worked.

    With a single route the parcel volume is not consulted. With two routes
    the combined parcel volume selects one of three tiers; 150 and 250 both
    belong to the middle tier.
    """
    if RouteCount(id_count) is RouteCount.SINGLE:
        return DailyRateQuote(SINGLE_ROUTE_RATE, TIER_SINGLE_ROUTE)

    parcels = coerce_count(parcel_count)
    if parcels < MID_VOLUME_MIN:
        return DailyRateQuote(LOW_VOLUME_RATE, TIER_LOW_VOLUME)
    if parcels <= MID_VOLUME_MAX:
        return DailyRateQuote(MID_VOLUME_RATE, TIER_MID_VOLUME)
    return DailyRateQuote(HIGH_VOLUME_RATE, TIER_HIGH_VOLUME)
