from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from django.utils import timezone

from inventory.services import distribution_totals
from leads.models import Lead
from sales.models import Sale
from support.models import SupportTicket

Window = Tuple[str, datetime, datetime]


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    idx = year * 12 + (month - 1) + delta
    return idx // 12, idx % 12 + 1


def month_windows(now: Optional[datetime] = None, count: int = 6) -> List[Window]:
    """
    Calendar months in the project timezone, oldest first, ending with the
    month containing ``now``. Each window is [start, end).
    """
    now = timezone.localtime(now or timezone.now())
    tz = now.tzinfo
    out: List[Window] = []
    for back in range(count - 1, -1, -1):
        y, m = _shift_month(now.year, now.month, -back)
        ny, nm = _shift_month(y, m, 1)
        start = datetime(y, m, 1, tzinfo=tz)
        end = datetime(ny, nm, 1, tzinfo=tz)
        out.append((start.strftime("%b %y"), start, end))
    return out


def year_windows(now: Optional[datetime] = None, count: int = 3) -> List[Window]:
    now = timezone.localtime(now or timezone.now())
    tz = now.tzinfo
    return [
        (str(y), datetime(y, 1, 1, tzinfo=tz), datetime(y + 1, 1, 1, tzinfo=tz))
        for y in range(now.year - count + 1, now.year + 1)
    ]


def _bucket(partner, label_key: str, windows: List[Window]) -> List[Dict[str, object]]:
    rows = []
    for label, start, end in windows:
        leads = Lead.objects.filter(assigned_to=partner, created_at__gte=start, created_at__lt=end).count()
        agg = Sale.objects.filter(partner=partner, date__gte=start, date__lt=end).aggregate(n=Count("id"), revenue=Sum("amount"))
        rows.append({
            label_key: label,
            "leadsAssigned": leads,
            "sales": agg["n"] or 0,
            "revenue": f"{agg['revenue'] or Decimal('0.00')}",
        })
    return rows


def partner_stats(partner, now: Optional[datetime] = None) -> Dict[str, object]:
    agg = Sale.objects.filter(partner=partner).aggregate(n=Count("id"), revenue=Sum("amount"))
    return {
        "partnerId": partner.id,
        "name": partner.name,
        "email": partner.email,
        "totalLeadsAssigned": Lead.objects.filter(assigned_to=partner).count(),
        "totalSales": agg["n"] or 0,
        "revenue": f"{agg['revenue'] or Decimal('0.00')}",
        "monthlyStats": _bucket(partner, "month", month_windows(now, 6)),
        "yearlyStats": _bucket(partner, "year", year_windows(now, 3)),
    }


def portal_overview() -> Dict[str, object]:
    User = get_user_model()
    lead_status = dict(Lead.objects.order_by().values_list("status").annotate(n=Count("id")).values_list("status", "n"))
    sales = Sale.objects.aggregate(n=Count("id"), revenue=Sum("amount"))
    kits = distribution_totals()
    return {
        "partners": User.objects.filter(role="partner").count(),
        "partnersProfileComplete": User.objects.filter(role="partner", is_profile_complete=True).count(),
        "leads": {
            "total": sum(lead_status.values()),
            **{s: lead_status.get(s, 0) for s, _ in Lead.STATUS_CHOICES},
        },
        "sales": sales["n"] or 0,
        "revenue": f"{sales['revenue'] or Decimal('0.00')}",
        "kitsDistributed": kits["kits"],
        "kitsDistributedAmount": f"{kits['amount']}",
        "openTickets": SupportTicket.objects.filter(status=SupportTicket.STATUS_OPEN).count(),
    }
