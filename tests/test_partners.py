from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from accounts.models import CustomUser
from commissions.models import CommissionSlab
from inventory.models import Inventory, KitDistribution
from leads.models import Lead
from partners.services import month_windows, partner_stats, portal_overview, year_windows
from sales.models import Sale
from support.models import SupportTicket


def _aware(*args):
    return timezone.make_aware(datetime(*args))


def test_month_windows_are_calendar_months_oldest_first():
    windows = month_windows(_aware(2024, 3, 15, 12, 0), 6)
    assert [label for label, _, _ in windows] == ["Oct 23", "Nov 23", "Dec 23", "Jan 24", "Feb 24", "Mar 24"]
    label, start, end = windows[-1]
    assert (start.month, start.day, end.month, end.day) == (3, 1, 4, 1)
    # consecutive windows touch without overlap
    assert all(a[2] == b[1] for a, b in zip(windows, windows[1:]))


def test_month_windows_cross_year_boundary():
    labels = [label for label, _, _ in month_windows(_aware(2024, 1, 31, 23, 30), 2)]
    assert labels == ["Dec 23", "Jan 24"]


def test_year_windows():
    assert [label for label, _, _ in year_windows(_aware(2024, 6, 1, 0, 0), 3)] == ["2022", "2023", "2024"]


@pytest.mark.django_db
def test_partner_stats_buckets(partner, make_lead):
    now = timezone.now()
    lead = make_lead(assigned_to=partner)
    make_lead(assigned_to=partner)
    Sale.objects.create(lead=lead, partner=partner, amount=Decimal("1500.00"), date=now)
    # older than the six monthly windows
    Sale.objects.create(lead=lead, partner=partner, amount=Decimal("500.00"), date=now - timedelta(days=400))

    stats = partner_stats(partner, now)
    assert stats["totalLeadsAssigned"] == 2
    assert stats["totalSales"] == 2
    assert stats["revenue"] == "2000.00"
    assert len(stats["monthlyStats"]) == 6
    current = stats["monthlyStats"][-1]
    assert (current["sales"], current["revenue"], current["leadsAssigned"]) == (1, "1500.00", 2)
    assert sum(m["sales"] for m in stats["monthlyStats"]) == 1
    assert stats["yearlyStats"][-1]["year"] == str(timezone.localtime(now).year)


@pytest.mark.django_db
def test_portal_overview(partner, make_user, make_lead):
    make_user(complete=False)
    make_lead(assigned_to=partner)
    lost = make_lead(assigned_to=partner, status=Lead.STATUS_LOST)
    Sale.objects.create(lead=lost, partner=partner, amount=Decimal("1000.00"))
    KitDistribution.objects.create(partner=partner, quantity=3, amount_per_kit=Decimal("100"))
    SupportTicket.objects.create(partner=partner, subject="s", message="m")

    data = portal_overview()
    assert data["partners"] == 2
    assert data["partnersProfileComplete"] == 1
    assert data["leads"] == {"total": 2, "new": 1, "contacted": 0, "successful": 0, "lost": 1}
    assert data["sales"] == 1
    assert data["revenue"] == "1000.00"
    assert data["kitsDistributed"] == 3
    assert data["kitsDistributedAmount"] == "300.00"
    assert data["openTickets"] == 1


@pytest.mark.django_db
def test_directory_filters_by_role(admin_api, partner, make_user):
    make_user(role="user")
    resp = admin_api.get("/api/partners/?role=partner")
    assert resp.status_code == 200
    assert [row["id"] for row in resp.data] == [partner.id]
    one = admin_api.get(f"/api/partners/?id={partner.id}")
    assert one.data[0]["roleDisplay"] == "Partner"
    assert admin_api.get("/api/partners/?id=999").status_code == 404


@pytest.mark.django_db
def test_directory_is_admin_only(partner_api):
    assert partner_api.get("/api/partners/").status_code == 403


@pytest.mark.django_db
def test_admin_completes_partner_profile(admin_api, make_user):
    user = make_user(role="user", complete=False)
    resp = admin_api.put(
        f"/api/partners/?id={user.id}",
        {"role": "partner", "name": "New Partner", "phone_number": "9876543210", "city": "Kochi", "state": "Kerala", "pincode": "682001"},
        format="json",
    )
    assert resp.status_code == 200
    assert resp.data["is_profile_complete"] is True
    assert CommissionSlab.objects.filter(partner=user).exists()
    assert Inventory.objects.filter(partner=user).exists()


@pytest.mark.django_db
def test_admin_cannot_promote_or_touch_admins(admin_api, portal_admin, partner):
    assert admin_api.put(f"/api/partners/?id={partner.id}", {"role": "admin"}, format="json").status_code == 400
    assert admin_api.put(f"/api/partners/?id={portal_admin.id}", {"name": "x"}, format="json").status_code == 404
    assert admin_api.delete(f"/api/partners/?id={portal_admin.id}").status_code == 404


@pytest.mark.django_db
def test_admin_deletes_partner(admin_api, partner):
    resp = admin_api.delete(f"/api/partners/?id={partner.id}")
    assert resp.status_code == 200
    assert not CustomUser.objects.filter(pk=partner.id).exists()


@pytest.mark.django_db
def test_stats_endpoint(admin_api, partner):
    assert admin_api.get("/api/partners/stats/").status_code == 400
    assert admin_api.get("/api/partners/stats/?partnerId=999").status_code == 404
    resp = admin_api.get(f"/api/partners/stats/?partnerId={partner.id}")
    assert resp.status_code == 200
    assert resp.data["partnerId"] == partner.id
    assert [m["month"] for m in resp.data["monthlyStats"]] == [label for label, _, _ in month_windows()]


@pytest.mark.django_db
def test_overview_endpoint(admin_api):
    resp = admin_api.get("/api/partners/overview/")
    assert resp.status_code == 200
    assert resp.data["partners"] == 0
