import pytest

from notifications.models import Notification, PartnerNotification
from notifications.services import NotificationError, create_notification, create_partner_notification

pytestmark = pytest.mark.django_db


def _partner_note(partner, n=1):
    return [
        create_partner_notification(type=PartnerNotification.LEAD_ALLOTED, message=f"lead {i}", partner=partner)
        for i in range(n)
    ]


def test_partner_lists_own_notifications(partner_api, partner, other_partner):
    _partner_note(partner, 3)
    _partner_note(other_partner, 2)
    resp = partner_api.get("/api/partner-notifications/?page_size=2")
    assert resp.status_code == 200
    assert resp.data["count"] == 3
    assert len(resp.data["results"]) == 2
    assert all(row["partner"] == partner.id for row in resp.data["results"])


def test_partner_mark_read_and_unread_count(partner_api, partner):
    notes = _partner_note(partner, 3)
    assert partner_api.get("/api/partner-notifications/unread-count/").data == {"unread": 3}

    resp = partner_api.patch("/api/partner-notifications/mark-read/", {"ids": [notes[0].id]}, format="json")
    assert resp.data == {"updated": 1}
    assert partner_api.get("/api/partner-notifications/unread-count/").data == {"unread": 2}

    unread = partner_api.get("/api/partner-notifications/?read=unread").data
    assert notes[0].id not in [row["id"] for row in unread["results"]]

    resp = partner_api.patch("/api/partner-notifications/mark-read/", {"all": True}, format="json")
    assert resp.data == {"updated": 2}


def test_mark_read_requires_ids_or_all(partner_api):
    resp = partner_api.patch("/api/partner-notifications/mark-read/", {}, format="json")
    assert resp.status_code == 400


def test_partner_cannot_mark_others_read(partner_api, other_partner):
    note = _partner_note(other_partner)[0]
    resp = partner_api.patch("/api/partner-notifications/mark-read/", {"ids": [note.id]}, format="json")
    assert resp.data == {"updated": 0}
    note.refresh_from_db()
    assert note.read_at is None


def test_admin_feed(admin_api, partner):
    create_notification(type=Notification.SALE_RECORDED, message="sale", partner=partner)
    create_notification(type=Notification.KIT_REQUEST, message="kits", partner=partner)

    resp = admin_api.get("/api/notifications/?type=kit_request")
    assert resp.data["count"] == 1
    assert resp.data["results"][0]["partner"]["email"] == partner.email
    assert admin_api.get("/api/notifications/unread-count/").data == {"unread": 2}

    admin_api.patch("/api/notifications/mark-read/", {"all": True}, format="json")
    assert admin_api.get("/api/notifications/unread-count/").data == {"unread": 0}
    assert admin_api.get("/api/notifications/?read=1").data["count"] == 2


def test_admin_feed_is_admin_only(partner_api):
    assert partner_api.get("/api/notifications/").status_code == 403


def test_admin_reads_a_partners_notifications(admin_api, partner, other_partner):
    _partner_note(partner, 2)
    _partner_note(other_partner, 1)
    assert admin_api.get(f"/api/partner-notifications/?id={partner.id}").data["count"] == 2


def test_unknown_type_is_rejected(partner):
    with pytest.raises(NotificationError):
        create_notification(type="SOMETHING", message="x", partner=partner)
    with pytest.raises(NotificationError):
        create_partner_notification(type=Notification.SALE_RECORDED, message="x", partner=partner)


def test_switched_off(settings, partner):
    settings.NOTIFICATIONS_ENABLED = False
    assert create_notification(type=Notification.SALE_RECORDED, message="x", partner=partner) is None
    assert not Notification.objects.exists()


def test_mark_read_model_helper(partner):
    note = _partner_note(partner)[0]
    assert not note.is_read
    note.mark_read()
    first = note.read_at
    note.mark_read()
    assert note.is_read
    assert note.read_at == first
