import os
import random
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from accounts.models import CustomUser
from commissions.services.ledger import recompute_partner_commission, upsert_slabs
from inventory.services import distribute_kits
from leads.models import Lead
from sales.models import Sale
from sales.services import record_sale, update_subscription

CITIES = ["Chennai", "Bengaluru", "Kochi", "Hyderabad", "Pune", "Mumbai"]
DEMO_SLABS = {"0-30": 5, "30-70": 7, "70-100": 10}


class Command(BaseCommand):
    help = "Seed demo data: an admin, N partners with slabs and kits, assigned leads and a few converted sales. Also writes loadtest/partners.csv for Locust."

    def add_arguments(self, parser):
        parser.add_argument("--partners", type=int, default=5)
        parser.add_argument("--leads_per_partner", type=int, default=20)
        parser.add_argument("--sales_per_partner", type=int, default=8)
        parser.add_argument("--kits_per_partner", type=int, default=25)
        parser.add_argument("--password", type=str, default="pass1234")
        parser.add_argument("--admin_email", type=str, default="admin@example.com")
        parser.add_argument("--seed", type=int, default=42)

    def _ensure_admin(self, email: str, password: str) -> CustomUser:
        u = CustomUser.objects.filter(email__iexact=email).first()
        if u:
            return u
        return CustomUser.objects.create_superuser(email=email, password=password, name="Portal Admin")

    def _ensure_partner(self, idx: int, password: str) -> CustomUser:
        email = f"partner{idx:02d}@example.com"
        u, created = CustomUser.objects.get_or_create(
            email=email,
            defaults={
                "role": CustomUser.ROLE_PARTNER,
                "name": f"Demo Partner {idx}",
                "phone_number": f"98{idx:08d}",
                "city": CITIES[idx % len(CITIES)],
                "state": "Demo State",
                "pincode": f"6000{idx:02d}",
                "is_profile_complete": True,
            },
        )
        if created:
            u.set_password(password)
            u.save()
        return u

    def _ensure_leads(self, partner: CustomUser, count: int, rng: random.Random) -> list:
        have = list(Lead.objects.filter(assigned_to=partner).order_by("id"))
        platforms = [p for p, _ in Lead.PLATFORM_CHOICES]
        for i in range(len(have), count):
            have.append(Lead.objects.create(
                name=f"Lead {partner.pk}-{i + 1}",
                mobile_no=f"9{partner.pk:04d}{i:05d}",
                email=f"lead{partner.pk}_{i + 1}@example.com",
                city=partner.city,
                platform=rng.choice(platforms),
                assigned_to=partner,
            ))
        return have

    def handle(self, *args, **opts):
        rng = random.Random(int(opts["seed"]))
        password = str(opts["password"])
        n_partners = int(opts["partners"])
        leads_per_partner = int(opts["leads_per_partner"])
        sales_per_partner = min(int(opts["sales_per_partner"]), leads_per_partner)
        kits = int(opts["kits_per_partner"])

        admin = self._ensure_admin(str(opts["admin_email"]).strip().lower(), password)
        self.stdout.write(self.style.SUCCESS(f"Admin ready: {admin.email}"))

        creds = []
        for idx in range(1, n_partners + 1):
            partner = self._ensure_partner(idx, password)
            creds.append((partner.email, password))
            upsert_slabs(partner, DEMO_SLABS)

            if not partner.inventories.exists():
                distribute_kits(partner=partner, quantity=kits, amount_per_kit=Decimal("1500.00"), notes="Demo stock")

            leads = self._ensure_leads(partner, leads_per_partner, rng)
            sold = set(Sale.objects.filter(partner=partner).values_list("lead_id", flat=True))
            made = 0
            for lead in leads[:sales_per_partner]:
                if lead.id in sold:
                    continue
                if not partner.inventories.filter(quantity__gte=1).exists():
                    self.stdout.write(self.style.WARNING(f"{partner.email}: out of kits"))
                    break
                sale = record_sale(partner=partner, lead_id=lead.id, amount=Decimal("1500.00"))
                # spread sale dates over the last few months for the stats charts
                Sale.objects.filter(pk=sale.pk).update(date=timezone.now() - timedelta(days=rng.randint(0, 150)))
                if rng.random() < 0.6:
                    renew = rng.random() < 0.5
                    update_subscription(
                        sale=sale,
                        first_month=Sale.YES,
                        amount_first_month=Decimal("999.00"),
                        renewal=Sale.YES if renew else Sale.NO,
                        amount_second_month=Decimal("999.00") if renew else None,
                    )
                made += 1

            managed, _ = recompute_partner_commission(partner)
            self.stdout.write(
                f"{partner.email}: {len(leads)} leads, {made} new sales, slab {managed.current_slab}, commission {managed.total_commission}"
            )

        # Write partners.csv for Locust
        out_dir = os.path.join(settings.BASE_DIR, "..", "loadtest")
        os.makedirs(out_dir, exist_ok=True)
        out_path = os.path.join(out_dir, "partners.csv")
        try:
            with open(out_path, "w", encoding="utf-8") as f:
                f.write("email,password\n")
                for email, pwd in creds:
                    f.write(f"{email},{pwd}\n")
        except OSError as e:
            self.stdout.write(self.style.WARNING(f"Failed to write partners.csv: {e}"))
        else:
            self.stdout.write(self.style.SUCCESS(f"Wrote partner credentials to {out_path}"))

        self.stdout.write(self.style.SUCCESS("Seed complete."))
