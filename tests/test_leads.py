import io

import openpyxl
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from leads.models import Lead
from notifications.models import Notification, PartnerNotification

pytestmark = pytest.mark.django_db

HEADER = ["name", "mobileNo", "email", "city", "platform"]


def _xlsx(rows):
    wb = openpyxl.Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _csv(rows):
    return ("\n".join(",".join(str(c) for c in row) for row in rows) + "\n").encode("utf-8")


def _upload(api, name, content):
    f = SimpleUploadedFile(name, content, content_type="application/octet-stream")
    return api.post("/api/leads/upload/", {"file": f}, format="multipart")


def test_admin_creates_lead_and_partner_is_notified(admin_api, partner):
    resp = admin_api.post(
        "/api/leads/",
        {
            "name": "Ravi", "mobile_no": "98765 43210", "email": "ravi@example.com",
            "city": "Kochi", "platform": "facebook", "assigned_to": partner.id,
        },
        format="json",
    )
    assert resp.status_code == 201
    assert resp.data["platform"] == "Facebook"
    assert resp.data["status"] == "new"
    assert resp.data["assignee"]["email"] == partner.email
    note = PartnerNotification.objects.get(partner=partner)
    assert note.type == PartnerNotification.LEAD_ALLOTED
    assert note.lead_id == resp.data["id"]


def test_lead_not_kept_when_allotment_notice_fails(admin_api, partner, monkeypatch):
    from notifications.services import NotificationError

    def _boom(**kwargs):
        raise NotificationError("Partner notification requires a partner")

    monkeypatch.setattr("leads.services.create_partner_notification", _boom)
    resp = admin_api.post(
        "/api/leads/",
        {
            "name": "Ravi", "mobile_no": "9876543210", "email": "ravi@example.com",
            "city": "Kochi", "platform": "Facebook", "assigned_to": partner.id,
        },
        format="json",
    )
    assert resp.status_code == 500
    assert resp.data["error"] == "Partner notification requires a partner"
    assert Lead.objects.count() == 0


def test_lead_rejects_short_mobile(admin_api):
    resp = admin_api.post(
        "/api/leads/",
        {"name": "X", "mobile_no": "12345", "email": "x@example.com", "city": "Kochi", "platform": "Instagram"},
        format="json",
    )
    assert resp.status_code == 400
    assert "mobile_no" in resp.data


def test_lead_cannot_be_assigned_to_non_partner(admin_api, portal_admin):
    resp = admin_api.post(
        "/api/leads/",
        {
            "name": "X", "mobile_no": "9876543210", "email": "x@example.com",
            "city": "Kochi", "platform": "Instagram", "assigned_to": portal_admin.id,
        },
        format="json",
    )
    assert resp.status_code == 400


def test_partner_cannot_create_lead(partner_api):
    resp = partner_api.post(
        "/api/leads/",
        {"name": "X", "mobile_no": "9876543210", "email": "x@example.com", "city": "Kochi", "platform": "Instagram"},
        format="json",
    )
    assert resp.status_code == 403


def test_partner_sees_only_own_leads(partner_api, partner, other_partner, make_lead):
    mine = make_lead(assigned_to=partner)
    make_lead(assigned_to=other_partner)
    make_lead()
    resp = partner_api.get("/api/leads/")
    assert resp.status_code == 200
    assert [row["id"] for row in resp.data] == [mine.id]


def test_admin_filters_by_partner_and_status(admin_api, partner, other_partner, make_lead):
    a = make_lead(assigned_to=partner)
    make_lead(assigned_to=partner, status=Lead.STATUS_LOST)
    make_lead(assigned_to=other_partner)

    resp = admin_api.get(f"/api/leads/?id={partner.id}")
    assert len(resp.data) == 2
    resp = admin_api.get(f"/api/leads/?id={partner.id}&status=new")
    assert [row["id"] for row in resp.data] == [a.id]


def test_partner_updates_status_and_admin_feed_records_it(partner_api, partner, make_lead):
    lead = make_lead(assigned_to=partner)
    resp = partner_api.put(f"/api/leads/?id={lead.id}", {"status": "contacted", "name": "Renamed"}, format="json")
    assert resp.status_code == 200
    lead.refresh_from_db()
    assert lead.status == Lead.STATUS_CONTACTED
    # name is not a partner-editable field
    assert lead.name != "Renamed"
    feed = Notification.objects.get(partner=partner)
    assert feed.type == Notification.LEAD_STATUS_UPDATE
    assert "contacted" in feed.message


def test_partner_cannot_reassign_lead(partner_api, partner, other_partner, make_lead):
    lead = make_lead(assigned_to=partner)
    resp = partner_api.put(f"/api/leads/?id={lead.id}", {"assigned_to": other_partner.id}, format="json")
    assert resp.status_code == 200
    lead.refresh_from_db()
    assert lead.assigned_to_id == partner.id


def test_admin_reassign_notifies_new_partner(admin_api, partner, other_partner, make_lead):
    lead = make_lead(assigned_to=partner)
    resp = admin_api.put(f"/api/leads/?id={lead.id}", {"assigned_to": other_partner.id}, format="json")
    assert resp.status_code == 200
    assert PartnerNotification.objects.filter(partner=other_partner, lead=lead).count() == 1
    # admin edits never land in the partner activity feed
    assert not Notification.objects.exists()


def test_put_requires_id(partner_api):
    resp = partner_api.put("/api/leads/", {"status": "lost"}, format="json")
    assert resp.status_code == 400
    assert resp.data["success"] is False


def test_put_on_someone_elses_lead_is_404(partner_api, other_partner, make_lead):
    lead = make_lead(assigned_to=other_partner)
    resp = partner_api.put(f"/api/leads/?id={lead.id}", {"status": "lost"}, format="json")
    assert resp.status_code == 404
    assert resp.data == {"success": False}


def test_upload_xlsx(admin_api):
    content = _xlsx([
        HEADER,
        ["Anu", 9876543210, "anu@example.com", "Kochi", "instagram"],
        ["Binu", "9876543211", "binu@example.com", "Thrissur", "YouTube"],
        [None, None, None, None, None],
    ])
    resp = _upload(admin_api, "leads.xlsx", content)
    assert resp.status_code == 201
    assert resp.data == {"message": "Leads uploaded successfully", "count": 2}
    anu = Lead.objects.get(email="anu@example.com")
    assert anu.mobile_no == "9876543210"
    assert anu.platform == "Instagram"
    assert anu.status == Lead.STATUS_NEW
    assert anu.assigned_to is None


def test_upload_csv_with_reordered_columns(admin_api):
    content = _csv([
        ["City", "Platform", "Name", "Email", "MobileNo", "Notes"],
        ["Kochi", "LinkedIn", "Chitra", "chitra@example.com", "9876543212", "met at expo"],
    ])
    resp = _upload(admin_api, "leads.csv", content)
    assert resp.status_code == 201
    assert Lead.objects.get(email="chitra@example.com").city == "Kochi"


def test_upload_missing_columns(admin_api):
    resp = _upload(admin_api, "leads.csv", _csv([["name", "email"], ["A", "a@example.com"]]))
    assert resp.status_code == 400
    assert resp.data["error"].startswith("Invalid file format. Required columns:")
    assert Lead.objects.count() == 0


def test_upload_bad_row_rejects_whole_file(admin_api):
    content = _csv([
        HEADER,
        ["Good", "9876543210", "good@example.com", "Kochi", "Facebook"],
        ["Bad", "9876543211", "not-an-email", "Kochi", "Myspace"],
    ])
    resp = _upload(admin_api, "leads.csv", content)
    assert resp.status_code == 400
    assert resp.data["details"][0]["row"] == 3
    assert Lead.objects.count() == 0


def test_upload_checks_mobile_like_create(admin_api):
    content = _csv([HEADER, ["Short", "12", "short@example.com", "Pune", "Facebook"]])
    resp = _upload(admin_api, "leads.csv", content)
    assert resp.status_code == 400
    assert resp.data["details"][0]["row"] == 2
    assert "mobile_no" in resp.data["details"][0]["errors"]
    assert Lead.objects.count() == 0


@pytest.mark.parametrize("name,build", [("leads.csv", _csv), ("leads.xlsx", _xlsx)])
def test_upload_error_rows_count_blank_lines(admin_api, name, build):
    content = build([
        HEADER,
        ["Good", "9876543210", "good@example.com", "Kochi", "Facebook"],
        ["", "", "", "", ""],
        ["Bad", "9876543211", "not-an-email", "Kochi", "Facebook"],
    ])
    resp = _upload(admin_api, name, content)
    assert resp.status_code == 400
    assert [d["row"] for d in resp.data["details"]] == [4]
    assert Lead.objects.count() == 0


def test_upload_rejects_unknown_extension(admin_api):
    resp = _upload(admin_api, "leads.txt", b"name\n")
    assert resp.status_code == 400
    assert "Unsupported file type" in resp.data["error"]


def test_upload_without_file(admin_api):
    resp = admin_api.post("/api/leads/upload/", {}, format="multipart")
    assert resp.status_code == 400
    assert resp.data["error"] == "No file uploaded"


def test_upload_respects_size_limit(admin_api, settings):
    settings.LEAD_UPLOAD_MAX_BYTES = 10
    resp = _upload(admin_api, "leads.csv", _csv([HEADER]))
    assert resp.status_code == 400
    assert "too large" in resp.data["error"]


def test_partner_cannot_upload(partner_api):
    resp = _upload(partner_api, "leads.csv", _csv([HEADER]))
    assert resp.status_code == 403
