import csv

import pytest
from django.core.management import call_command

from accounts.models import CustomUser
from commissions.models import ManagedCommission
from inventory.models import Inventory
from sales.models import Sale


@pytest.mark.django_db
def test_healthz(api_client):
    resp = api_client.get("/healthz")
    assert resp.status_code == 200
    assert resp.data == {"status": "ok", "db": True}


@pytest.mark.django_db
def test_portal_info_is_public(api_client):
    resp = api_client.get("/api/portal/")
    assert resp.status_code == 200
    assert [s["range"] for s in resp.data["commission"]["slabs"]] == ["0-30", "30-70", "70-100"]
    assert resp.data["commission"]["renewal_factor"] == "0.75"
    assert "Facebook" in resp.data["lead_platforms"]
    assert resp.data["lead_statuses"] == ["new", "contacted", "successful", "lost"]


@pytest.mark.django_db
def test_seed_portal_demo(settings, tmp_path):
    (tmp_path / "backend").mkdir()
    settings.BASE_DIR = tmp_path / "backend"
    call_command(
        "seed_portal_demo",
        partners=2, leads_per_partner=4, sales_per_partner=3, kits_per_partner=5,
    )

    partners = CustomUser.objects.filter(role=CustomUser.ROLE_PARTNER)
    assert partners.count() == 2
    assert CustomUser.objects.get(email="admin@example.com").is_portal_admin
    for p in partners:
        assert Sale.objects.filter(partner=p).count() == 3
        assert Inventory.objects.get(partner=p).quantity == 2
        assert ManagedCommission.objects.get(partner=p).total_sales == 3

    with open(tmp_path / "loadtest" / "partners.csv", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert {r["email"] for r in rows} == set(partners.values_list("email", flat=True))

    # a second run tops nothing up twice
    call_command("seed_portal_demo", partners=2, leads_per_partner=4, sales_per_partner=3, kits_per_partner=5)
    assert Sale.objects.count() == 6
