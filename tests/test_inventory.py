from decimal import Decimal

import pytest

from inventory.models import Inventory, KitDistribution, KitRequest
from inventory.services import (
    InsufficientInventory,
    InventoryUnavailable,
    add_stock,
    consume_kit_for_sale,
    distribution_totals,
    ensure_inventory,
)
from notifications.models import Notification, PartnerNotification

pytestmark = pytest.mark.django_db


def _distribute(api, partner, kits, amount="1500.00", **extra):
    body = {"partnerId": partner.id, "kitsSent": kits, "amount": amount}
    body.update(extra)
    return api.post("/api/kit-distribution/", body, format="json")


def test_distribution_merges_into_one_available_row(admin_api, partner):
    resp = _distribute(admin_api, partner, 5)
    assert resp.status_code == 200
    assert resp.data["message"] == "Distribution recorded successfully"
    assert resp.data["distribution"]["total_amount"] == "7500.00"
    assert resp.data["inventory"]["quantity"] == 5

    _distribute(admin_api, partner, 3, amount="1200.00")
    inv = Inventory.objects.get(partner=partner)
    assert inv.quantity == 8
    assert inv.unit_price == Decimal("1200.00")
    assert KitDistribution.objects.filter(partner=partner).count() == 2
    assert PartnerNotification.objects.filter(partner=partner, type=PartnerNotification.KITS_DISTRIBUTED).count() == 2


def test_distribution_validation(admin_api, partner, portal_admin):
    assert _distribute(admin_api, partner, 0).status_code == 400
    assert _distribute(admin_api, partner, 2, amount="-5").status_code == 400
    assert _distribute(admin_api, portal_admin, 2).status_code == 400


def test_partner_cannot_distribute(partner_api, partner):
    assert _distribute(partner_api, partner, 5).status_code == 403


def test_distribution_list_is_scoped(admin_api, client_for, partner, other_partner):
    _distribute(admin_api, partner, 2)
    _distribute(admin_api, other_partner, 4)
    mine = client_for(partner).get("/api/kit-distribution/?partnerId=%s" % other_partner.id)
    assert [row["quantity"] for row in mine.data] == [2]
    assert len(admin_api.get("/api/kit-distribution/").data) == 2


def test_summary_for_partner(admin_api, partner_api, partner):
    _distribute(admin_api, partner, 5)
    resp = partner_api.get("/api/kit-distribution/summary/")
    assert resp.status_code == 200
    assert resp.data["inventory"] == {"available": 5, "total": 5, "distributed": 0}
    assert resp.data["requests"] == []


def test_summary_without_inventory_is_zero(partner_api):
    resp = partner_api.get("/api/kit-distribution/summary/")
    assert resp.data["inventory"] == {"available": 0, "total": 0, "distributed": 0}


def test_admin_summary_needs_partner(admin_api):
    assert admin_api.get("/api/kit-distribution/summary/").status_code == 400
    assert admin_api.get("/api/kit-distribution/summary/?partnerId=999").status_code == 404


def test_kit_request_flow(admin_api, partner_api, partner):
    add_stock(partner, 5, Decimal("1500.00"))

    resp = partner_api.post("/api/kit-distribution/requests/", {"quantity": 3}, format="json")
    assert resp.status_code == 201
    req_id = resp.data["request"]["id"]
    assert resp.data["request"]["status"] == "pending"
    assert resp.data["inventory"]["available"] == 5
    assert Notification.objects.filter(type=Notification.KIT_REQUEST, kit_request_id=req_id).exists()

    resp = admin_api.put("/api/kit-distribution/requests/", {"requestId": req_id, "status": "Approved"}, format="json")
    assert resp.status_code == 200
    assert resp.data["requests"][0]["status"] == "approved"
    req = KitRequest.objects.get(pk=req_id)
    assert req.decided_at is not None
    assert PartnerNotification.objects.filter(
        partner=partner, type=PartnerNotification.KIT_REQUEST_APPROVAL, kit_request=req
    ).exists()


def test_kit_request_needs_stock(partner_api, partner):
    resp = partner_api.post("/api/kit-distribution/requests/", {"quantity": 1}, format="json")
    assert resp.status_code == 400
    assert resp.data["error"] == "Inventory not initialized"

    add_stock(partner, 2, Decimal("1500.00"))
    resp = partner_api.post("/api/kit-distribution/requests/", {"quantity": 3}, format="json")
    assert resp.status_code == 400
    assert resp.data["error"] == "Not enough kits available"
    assert not KitRequest.objects.exists()


def test_kit_request_status_errors(admin_api, partner_api, partner):
    add_stock(partner, 5, Decimal("1500.00"))
    req_id = partner_api.post("/api/kit-distribution/requests/", {"quantity": 1}, format="json").data["request"]["id"]

    resp = admin_api.put("/api/kit-distribution/requests/", {"requestId": req_id, "status": "shipped"}, format="json")
    assert resp.status_code == 400
    assert resp.data["error"] == "Invalid status value"
    resp = admin_api.put("/api/kit-distribution/requests/", {"requestId": 999, "status": "approved"}, format="json")
    assert resp.status_code == 404
    assert partner_api.put(
        "/api/kit-distribution/requests/", {"requestId": req_id, "status": "approved"}, format="json"
    ).status_code == 403


def test_admin_adds_and_edits_stock(admin_api, partner):
    resp = admin_api.post("/api/inventory/", {"partnerId": partner.id, "quantity": 4, "unitPrice": "99.50"}, format="json")
    assert resp.status_code == 201
    inv_id = resp.data["id"]

    resp = admin_api.put(f"/api/inventory/?id={inv_id}", {"quantity": 7}, format="json")
    assert resp.status_code == 200
    assert resp.data["quantity"] == 7

    assert admin_api.put(f"/api/inventory/?id={inv_id}", {"quantity": -1}, format="json").status_code == 400
    assert admin_api.put("/api/inventory/?id=999", {"quantity": 1}, format="json").status_code == 404
    assert admin_api.put("/api/inventory/", {"quantity": 1}, format="json").status_code == 400


def test_inventory_list_is_scoped(client_for, partner, other_partner):
    add_stock(partner, 1, Decimal("10"))
    add_stock(other_partner, 2, Decimal("10"))
    resp = client_for(partner).get("/api/inventory/")
    assert resp.status_code == 200
    assert [row["partner"] for row in resp.data] == [partner.id]


def test_consume_kit_never_goes_negative(partner):
    with pytest.raises(InventoryUnavailable):
        consume_kit_for_sale(partner)

    ensure_inventory(partner)
    with pytest.raises(InsufficientInventory):
        consume_kit_for_sale(partner)

    add_stock(partner, 1, Decimal("10"))
    inv = consume_kit_for_sale(partner)
    assert (inv.quantity, inv.distributed) == (0, 1)
    with pytest.raises(InsufficientInventory):
        consume_kit_for_sale(partner)


def test_distribution_totals_skip_cancelled(partner):
    KitDistribution.objects.create(partner=partner, quantity=2, amount_per_kit=Decimal("100"))
    KitDistribution.objects.create(partner=partner, quantity=5, amount_per_kit=Decimal("100"), status="cancelled")
    totals = distribution_totals(partner)
    assert totals == {"kits": 2, "amount": Decimal("200.00")}
