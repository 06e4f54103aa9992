from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from commissions.models import CommissionSlab
from commissions.services.calculator import CommissionConfigError
from commissions.services.ledger import recompute_partner_commission


class Command(BaseCommand):
    help = "Rebuild the commission ledger from sales history for one partner (--partner) or every partner with slabs."

    def add_arguments(self, parser):
        parser.add_argument("--partner", type=int, default=None, help="Partner user id")

    def handle(self, *args, **options):
        User = get_user_model()
        partner_id = options.get("partner")
        if partner_id:
            partners = list(User.objects.filter(pk=partner_id))
            if not partners:
                raise CommandError(f"Partner {partner_id} not found")
            if not CommissionSlab.objects.filter(partner_id=partner_id).exists():
                raise CommandError(f"Partner {partner_id} has no commission slabs")
        else:
            ids = CommissionSlab.objects.values_list("partner_id", flat=True)
            partners = list(User.objects.filter(pk__in=ids).order_by("id"))

        done = failed = 0
        for p in partners:
            try:
                managed, _ = recompute_partner_commission(p)
            except CommissionConfigError as e:
                failed += 1
                self.stderr.write(self.style.WARNING(f"{p.email}: {e}"))
                continue
            done += 1
            self.stdout.write(f"{p.email}: slab {managed.current_slab}, total {managed.total_commission}")

        self.stdout.write(self.style.SUCCESS(f"Recomputed {done} partner(s), {failed} failed."))
