import pytest
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import CustomUser
from commissions.models import CommissionSlab
from inventory.models import Inventory

pytestmark = pytest.mark.django_db


def test_signup_defaults_to_partner_and_lowercases_email(api_client):
    resp = api_client.post(
        "/api/accounts/signup/",
        {"name": "Asha", "email": "Asha@Example.com", "phone": "9876543210", "password": "secret12"},
        format="json",
    )
    assert resp.status_code == 201
    assert resp.data["message"] == "User created successfully"
    assert resp.data["user"]["email"] == "asha@example.com"
    assert resp.data["user"]["role"] == "partner"
    user = CustomUser.objects.get(email="asha@example.com")
    assert user.phone_number == "9876543210"
    assert user.check_password("secret12")
    assert user.is_profile_complete is False


def test_signup_rejects_duplicate_email(api_client, partner):
    resp = api_client.post(
        "/api/accounts/signup/",
        {"name": "Dup", "email": partner.email.upper(), "password": "secret12"},
        format="json",
    )
    assert resp.status_code == 400
    assert resp.data["email"][0] == "User already exists"


def test_signup_cannot_pick_admin_role(api_client):
    resp = api_client.post(
        "/api/accounts/signup/",
        {"name": "Eve", "email": "eve@example.com", "password": "secret12", "role": "admin"},
        format="json",
    )
    assert resp.status_code == 400
    assert not CustomUser.objects.filter(email="eve@example.com").exists()


def test_login_returns_tokens_with_role_claims(api_client, partner):
    resp = api_client.post(
        "/api/accounts/login/", {"email": partner.email, "password": "pass1234"}, format="json"
    )
    assert resp.status_code == 200
    assert resp.data["user"]["id"] == partner.id
    assert resp.data["user"]["role"] == "partner"
    token = AccessToken(resp.data["access"])
    assert token["role"] == "partner"
    assert token["email"] == partner.email
    assert token["is_profile_complete"] is True


def test_login_wrong_password(api_client, partner):
    resp = api_client.post(
        "/api/accounts/login/", {"email": partner.email, "password": "nope"}, format="json"
    )
    assert resp.status_code == 401


def test_login_role_mismatch(api_client, partner):
    resp = api_client.post(
        "/api/accounts/login/",
        {"email": partner.email, "password": "pass1234", "role": "admin"},
        format="json",
    )
    assert resp.status_code == 400


def test_refresh_keeps_role_claims(api_client, partner):
    login = api_client.post(
        "/api/accounts/login/", {"email": partner.email, "password": "pass1234"}, format="json"
    )
    resp = api_client.post("/api/accounts/token/refresh/", {"refresh": login.data["refresh"]}, format="json")
    assert resp.status_code == 200
    assert AccessToken(resp.data["access"])["role"] == "partner"


def _login(api_client, user):
    resp = api_client.post("/api/accounts/login/", {"email": user.email, "password": "pass1234"}, format="json")
    assert resp.status_code == 200
    return resp.data


def test_logout_blacklists_refresh_token(api_client, partner):
    tokens = _login(api_client, partner)
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

    resp = api_client.post("/api/accounts/logout/", {"refresh": tokens["refresh"]}, format="json")
    assert resp.status_code == 200

    resp = api_client.post("/api/accounts/token/refresh/", {"refresh": tokens["refresh"]}, format="json")
    assert resp.status_code == 401
    resp = api_client.post("/api/accounts/logout/", {"refresh": tokens["refresh"]}, format="json")
    assert resp.status_code == 400


def test_logout_requires_refresh_token(partner_api):
    resp = partner_api.post("/api/accounts/logout/", {}, format="json")
    assert resp.status_code == 400
    assert resp.data["detail"] == "Refresh token is required"


def test_logout_rejects_someone_elses_token(api_client, partner, other_partner, client_for):
    tokens = _login(api_client, other_partner)
    resp = client_for(partner).post("/api/accounts/logout/", {"refresh": tokens["refresh"]}, format="json")
    assert resp.status_code == 403
    resp = api_client.post("/api/accounts/token/refresh/", {"refresh": tokens["refresh"]}, format="json")
    assert resp.status_code == 200


def test_profile_requires_auth(api_client):
    assert api_client.get("/api/accounts/profile/").status_code == 401


def test_completing_profile_provisions_slab_and_inventory(make_user, client_for):
    user = make_user(complete=False)
    api = client_for(user)
    resp = api.patch(
        "/api/accounts/profile/",
        {"name": "Ravi", "phone_number": "9876500000", "city": "Kochi", "state": "Kerala", "pincode": "682001"},
        format="json",
    )
    assert resp.status_code == 200
    assert resp.data["message"] == "Profile updated successfully"
    assert resp.data["user"]["is_profile_complete"] is True

    slab = CommissionSlab.objects.get(partner=user)
    assert slab.slabs == {"0-30": 0, "30-70": 0, "70-100": 0}
    inv = Inventory.objects.get(partner=user)
    assert (inv.quantity, inv.distributed) == (0, 0)


def test_partial_profile_stays_incomplete(make_user, client_for):
    user = make_user(complete=False)
    resp = client_for(user).patch("/api/accounts/profile/", {"name": "Only Name"}, format="json")
    assert resp.status_code == 200
    assert resp.data["user"]["is_profile_complete"] is False
    assert not CommissionSlab.objects.filter(partner=user).exists()


def test_profile_cannot_set_completion_flag(make_user, client_for):
    user = make_user(complete=False)
    resp = client_for(user).patch("/api/accounts/profile/", {"is_profile_complete": True}, format="json")
    assert resp.status_code == 200
    user.refresh_from_db()
    assert user.is_profile_complete is False


def test_google_account_keeps_email(make_user, client_for):
    user = make_user(google_id="g-123")
    resp = client_for(user).patch("/api/accounts/profile/", {"email": "changed@example.com"}, format="json")
    assert resp.status_code == 200
    user.refresh_from_db()
    assert user.email != "changed@example.com"


def test_admin_creates_support_user(admin_api):
    resp = admin_api.post(
        "/api/accounts/support-users/",
        {"name": "Desk", "email": "desk@example.com", "password": "secret12"},
        format="json",
    )
    assert resp.status_code == 201
    assert CustomUser.objects.get(email="desk@example.com").role == CustomUser.ROLE_SUPPORT


def test_partner_cannot_create_support_user(partner_api):
    resp = partner_api.post(
        "/api/accounts/support-users/",
        {"name": "Desk", "email": "desk@example.com", "password": "secret12"},
        format="json",
    )
    assert resp.status_code == 403


def test_create_superuser_is_portal_admin(db):
    u = CustomUser.objects.create_superuser(email="Root@Example.com", password="x")
    assert u.email == "root@example.com"
    assert u.role == CustomUser.ROLE_ADMIN
    assert u.is_portal_admin
