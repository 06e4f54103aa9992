from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from django.conf import settings


# (key, min, max) in ascending order; ranges are inclusive and share boundaries
CANONICAL_SLABS: Tuple[Tuple[str, int, int], ...] = (
    ("0-30", 0, 30),
    ("30-70", 30, 70),
    ("70-100", 70, 100),
)

# Second-month renewals earn 75% of the slab rate
RENEWAL_DEPRECIATION = Decimal("0.75")

_KEY_RE = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")
_HUNDRED = Decimal("100")


class CommissionConfigError(RuntimeError):
    pass


def _q2(x: Decimal) -> Decimal:
    return x.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _money(x) -> Decimal:
    if x is None or x == "":
        return Decimal("0")
    try:
        return Decimal(str(x))
    except (InvalidOperation, ValueError):
        raise CommissionConfigError(f"Invalid amount: {x!r}")


def _rate(x) -> Decimal:
    if isinstance(x, bool):
        raise CommissionConfigError(f"Invalid rate: {x!r}")
    try:
        rate = Decimal(str(x).strip()) if x not in (None, "") else Decimal("0")
    except (InvalidOperation, ValueError):
        raise CommissionConfigError(f"Invalid rate: {x!r}")
    if not rate.is_finite() or rate < 0:
        raise CommissionConfigError(f"Rate must be a non-negative number: {x!r}")
    # stored as a percent with two decimals on each ledger line
    if rate > _HUNDRED or rate.as_tuple().exponent < -2:
        raise CommissionConfigError(f"Rate must be a percentage (0-100) with at most 2 decimals: {x!r}")
    return rate


def renewal_factor() -> Decimal:
    raw = getattr(settings, "COMMISSION_RENEWAL_FACTOR", None)
    if raw in (None, ""):
        return RENEWAL_DEPRECIATION
    try:
        factor = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        raise CommissionConfigError(f"Invalid COMMISSION_RENEWAL_FACTOR: {raw!r}")
    if not factor.is_finite() or factor < 0 or factor > 1:
        raise CommissionConfigError(f"COMMISSION_RENEWAL_FACTOR must be within [0, 1]: {raw!r}")
    return factor


@dataclass(frozen=True)
class Slab:
    key: str
    min: int
    max: int
    rate: Decimal  # percent

    def contains(self, count: int) -> bool:
        return self.min <= count <= self.max


@dataclass(frozen=True)
class SlabTable:
    """
    A partner's slab rates, ordered by (min, max).

    Built from the stored JSON object ``{"0-30": 5, "30-70": 7.5, ...}``.
    Canonical ranges missing from the object are filled in at rate 0, which
    matches the zero-rate row created when a partner completes their profile.
    """
    slabs: Tuple[Slab, ...]

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "SlabTable":
        if mapping is None:
            mapping = {}
        if not isinstance(mapping, Mapping):
            raise CommissionConfigError("Slabs must be an object of {range: rate}.")

        parsed: Dict[str, Slab] = {}
        for raw_key, raw_rate in mapping.items():
            m = _KEY_RE.match(str(raw_key))
            if not m:
                raise CommissionConfigError(f"Invalid slab range: {raw_key!r}")
            lo, hi = int(m.group(1)), int(m.group(2))
            if lo > hi:
                raise CommissionConfigError(f"Invalid slab range: {raw_key!r} (min > max)")
            key = f"{lo}-{hi}"
            if key in parsed:
                raise CommissionConfigError(f"Duplicate slab range: {raw_key!r}")
            parsed[key] = Slab(key=key, min=lo, max=hi, rate=_rate(raw_rate))

        for key, lo, hi in CANONICAL_SLABS:
            parsed.setdefault(key, Slab(key=key, min=lo, max=hi, rate=Decimal("0")))

        ordered = tuple(sorted(parsed.values(), key=lambda s: (s.min, s.max)))
        return cls(slabs=ordered)

    @classmethod
    def zero(cls) -> "SlabTable":
        return cls.from_mapping({})

    def lookup(self, count: int) -> Slab:
        """
        First slab (ascending min) containing ``count`` wins, so a shared
        boundary belongs to the lower slab: 30 -> "0-30", 70 -> "30-70".
        Counts past the last range stay in the last slab and counts in a gap
        between ranges stay in the slab below the gap.
        """
        if count < 0:
            raise ValueError("count must be >= 0")
        best = self.slabs[0]
        for slab in self.slabs:
            if slab.contains(count):
                return slab
            if slab.min <= count:
                best = slab
        return best

    def current_slab_key(self, count: int) -> str:
        return self.lookup(count).key

    def as_mapping(self) -> Dict[str, str]:
        return {s.key: str(s.rate) for s in self.slabs}


@dataclass(frozen=True)
class SaleFacts:
    id: int
    date: datetime
    amount: Decimal = Decimal("0")
    first_month: bool = False
    amount_first_month: Optional[Decimal] = None
    renewal: bool = False
    amount_second_month: Optional[Decimal] = None

    @property
    def eligible(self) -> bool:
        return bool(self.first_month or self.renewal)


@dataclass(frozen=True)
class SaleCommissionLine:
    sale_id: int
    date: datetime
    eligible_count: int
    slab: str
    rate: Decimal
    first_month_commission: Decimal
    renewal_commission: Decimal
    total: Decimal

    def as_dict(self) -> Dict[str, Any]:
        return {
            "saleId": self.sale_id,
            "date": self.date.isoformat() if self.date else None,
            "eligibleSalesCount": self.eligible_count,
            "slab": self.slab,
            "rate": f"{self.rate}",
            "firstMonthCommission": f"{self.first_month_commission}",
            "renewalCommission": f"{self.renewal_commission}",
            "commission": f"{self.total}",
        }


@dataclass(frozen=True)
class CommissionBreakdown:
    lines: Tuple[SaleCommissionLine, ...] = field(default_factory=tuple)
    total_sales: int = 0
    eligible_sales: int = 0
    first_month_sales: int = 0
    renewal_sales: int = 0
    current_slab: str = CANONICAL_SLABS[0][0]
    total_commission: Decimal = Decimal("0.00")

    def as_dict(self) -> Dict[str, Any]:
        return {
            "totalSales": self.total_sales,
            "eligibleSales": self.eligible_sales,
            "firstMonthSales": self.first_month_sales,
            "secondMonthRenewals": self.renewal_sales,
            "currentSlab": self.current_slab,
            "totalCommission": f"{self.total_commission}",
            "sales": [ln.as_dict() for ln in self.lines],
        }


def compute_breakdown(
    table: SlabTable,
    sales: Iterable[SaleFacts],
    factor: Optional[Decimal] = None,
) -> CommissionBreakdown:
    """
    Pure calculator over a partner's full sales history.

    For each sale, the eligible-sales count is the number of eligible sales
    dated at or before it (ties on date count together). That count picks the
    slab; the sale then earns:
      - first month: amount_first_month * rate / 100
      - renewal:     amount_second_month * rate / 100 * factor
        (only when the first month was also taken)
    Every part is rounded half-up to paise.
    """
    factor = renewal_factor() if factor is None else Decimal(str(factor))
    ordered: List[SaleFacts] = sorted(sales, key=lambda s: (s.date, s.id))
    eligible_dates = [s.date for s in ordered if s.eligible]

    lines: List[SaleCommissionLine] = []
    total = Decimal("0.00")
    for sale in ordered:
        count = bisect_right(eligible_dates, sale.date)
        slab = table.lookup(count)
        pct = slab.rate / _HUNDRED

        first_part = Decimal("0.00")
        renewal_part = Decimal("0.00")
        if sale.first_month:
            first_part = _q2(_money(sale.amount_first_month) * pct)
            if sale.renewal:
                renewal_part = _q2(_money(sale.amount_second_month) * pct * factor)

        line_total = first_part + renewal_part
        total += line_total
        lines.append(SaleCommissionLine(
            sale_id=sale.id,
            date=sale.date,
            eligible_count=count,
            slab=slab.key,
            rate=slab.rate,
            first_month_commission=first_part,
            renewal_commission=renewal_part,
            total=line_total,
        ))

    return CommissionBreakdown(
        lines=tuple(lines),
        total_sales=len(ordered),
        eligible_sales=len(eligible_dates),
        first_month_sales=sum(1 for s in ordered if s.first_month),
        renewal_sales=sum(1 for s in ordered if s.renewal),
        current_slab=table.current_slab_key(len(eligible_dates)),
        total_commission=_q2(total),
    )


def slab_key_for_sales_count(count: int) -> str:
    """Canonical slab for a raw sales count, as shown on the admin stats board."""
    return CANONICAL_TABLE.current_slab_key(max(0, int(count)))


CANONICAL_TABLE = SlabTable.zero()
