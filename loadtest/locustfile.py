import csv
import os
import threading
from collections import deque
from typing import Optional

from locust import HttpUser, task, between, events


class CredPool:
    """
    Thread-safe round-robin credential feeder.
    Expects CSV with header: email,password
    """
    _lock = threading.Lock()
    _pool: deque[tuple[str, str]] = deque()
    _loaded = False

    @classmethod
    def load(cls, csv_path: Optional[str] = None):
        if cls._loaded:
            return
        with cls._lock:
            if cls._loaded:
                return
            # loadtest/partners.csv is written by seed_portal_demo
            default_csv = csv_path or os.getenv("CREDENTIALS_CSV") or os.path.join(os.path.dirname(__file__), "partners.csv")
            items: list[tuple[str, str]] = []
            try:
                with open(default_csv, "r", encoding="utf-8") as f:
                    reader = csv.DictReader(f)
                    for row in reader:
                        e = (row.get("email") or "").strip()
                        p = row.get("password") or ""
                        if e:
                            items.append((e, p))
            except FileNotFoundError:
                # Single fallback user from env for smoke tests
                env_user = os.getenv("LT_EMAIL")
                env_pass = os.getenv("LT_PASS", "")
                if env_user:
                    items.append((env_user, env_pass))
            if not items:
                # Placeholder that will 401; surfaces misconfig
                items.append(("missing@example.com", "missing_pass"))
            cls._pool = deque(items)
            cls._loaded = True

    @classmethod
    def next_cred(cls) -> tuple[str, str]:
        cls.load()
        with cls._lock:
            item = cls._pool.popleft()
            cls._pool.append(item)
            return item


class PartnerUser(HttpUser):
    """
    Simulates a partner browsing their portal.

    Endpoints exercised:
      - POST /api/accounts/login/
      - GET  /healthz
      - GET  /api/leads/
      - GET  /api/sales/?partnerId=<self>
      - GET  /api/commissions/calculate/
      - GET  /api/kit-distribution/summary/
      - GET  /api/partner-notifications/unread-count/
    """
    wait_time = between(float(os.getenv("LT_WAIT_MIN", "0.2")), float(os.getenv("LT_WAIT_MAX", "1.2")))

    weight_leads = int(os.getenv("LT_WEIGHT_LEADS", "5"))
    weight_sales = int(os.getenv("LT_WEIGHT_SALES", "3"))
    weight_commission = int(os.getenv("LT_WEIGHT_COMMISSION", "3"))
    weight_kits = int(os.getenv("LT_WEIGHT_KITS", "1"))

    access_token: Optional[str] = None
    partner_id: Optional[int] = None

    def on_start(self):
        email, password = CredPool.next_cred()
        payload = {"email": email, "password": password}
        with self.client.post("/api/accounts/login/", json=payload, name="auth_login", catch_response=True) as resp:
            if not resp.ok:
                resp.failure(f"Login failed {resp.status_code}")
                return
            try:
                data = resp.json()
            except ValueError as e:
                resp.failure(f"Login JSON parse error: {e}")
                return
            tok = data.get("access")
            if not tok:
                resp.failure("No access token in response")
                return
            self.access_token = tok
            self.partner_id = (data.get("user") or {}).get("id")

    def _auth_headers(self) -> dict:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def _get(self, path: str, name: str):
        with self.client.get(path, headers=self._auth_headers(), name=name, catch_response=True) as resp:
            if resp.status_code == 401:
                # token expired; log in again on the next round
                self.on_start()
            if not resp.ok:
                resp.failure(f"status={resp.status_code}")

    @task(weight_leads)
    def t_leads(self):
        self._get("/api/leads/", "leads")

    @task(weight_sales)
    def t_sales(self):
        if self.partner_id:
            self._get(f"/api/sales/?partnerId={self.partner_id}", "sales")

    @task(weight_commission)
    def t_commission(self):
        self._get("/api/commissions/calculate/", "commission_calculate")

    @task(weight_kits)
    def t_kit_summary(self):
        self._get("/api/kit-distribution/summary/", "kit_summary")

    @task(1)
    def t_unread(self):
        self._get("/api/partner-notifications/unread-count/", "partner_unread")

    @task(1)
    def t_healthz(self):
        self.client.get("/healthz", name="healthz")


@events.test_start.add_listener
def _(environment, **kwargs):
    CredPool.load(os.getenv("CREDENTIALS_CSV"))
