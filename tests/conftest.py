"""
Shared fixtures for the portal test-suite.

Users are created through CustomUserManager; API calls go through DRF's
APIClient with force_authenticate so no JWT round-trip is needed except in
the login tests.
"""

from __future__ import annotations

import itertools
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from accounts.models import CustomUser
from commissions.services.ledger import upsert_slabs
from inventory.services import add_stock
from leads.models import Lead

DEMO_SLABS = {"0-30": 5, "30-70": 7, "70-100": 10}


@pytest.fixture(autouse=True)
def _portal_settings(settings):
    settings.MAIL_ENABLED = False
    settings.MAIL_ASYNC = False
    settings.NOTIFICATIONS_ENABLED = True
    settings.COMMISSION_RENEWAL_FACTOR = "0.75"
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    settings.STORAGES = {
        "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
        "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
    }


@pytest.fixture
def make_user(db):
    seq = itertools.count(1)

    def _make(role=CustomUser.ROLE_PARTNER, complete=True, **extra):
        n = next(seq)
        email = extra.pop("email", f"{role}{n}@example.com")
        password = extra.pop("password", "pass1234")
        fields = {"role": role, "name": f"{role.title()} {n}"}
        if complete:
            fields.update(phone_number=f"98765{n:05d}", city="Kochi", state="Kerala", pincode="682001")
        fields.update(extra)
        fields.setdefault("is_profile_complete", complete)
        return CustomUser.objects.create_user(email=email, password=password, **fields)

    return _make


@pytest.fixture
def portal_admin(make_user):
    return make_user(role=CustomUser.ROLE_ADMIN, email="admin@example.com")


@pytest.fixture
def partner(make_user):
    return make_user()


@pytest.fixture
def other_partner(make_user):
    return make_user()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def _client(user):
        c = APIClient()
        c.force_authenticate(user=user)
        return c

    return _client


@pytest.fixture
def admin_api(client_for, portal_admin):
    return client_for(portal_admin)


@pytest.fixture
def partner_api(client_for, partner):
    return client_for(partner)


@pytest.fixture
def make_lead(db):
    seq = itertools.count(1)

    def _make(assigned_to=None, **extra):
        n = next(seq)
        fields = {
            "name": f"Lead {n}",
            "mobile_no": f"9000000{n:03d}",
            "email": f"lead{n}@example.com",
            "city": "Kochi",
            "platform": "Facebook",
            "assigned_to": assigned_to,
        }
        fields.update(extra)
        return Lead.objects.create(**fields)

    return _make


@pytest.fixture
def stocked_partner(partner):
    """A partner with demo slab rates and ten kits in hand."""
    upsert_slabs(partner, DEMO_SLABS)
    add_stock(partner, 10, Decimal("1500.00"))
    return partner
