from django.conf import settings
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class _ReadStateMixin:
    def mark_read(self):
        if not self.read_at:
            self.read_at = timezone.now()
            self.save(update_fields=["read_at"])

    @property
    def is_read(self) -> bool:
        return bool(self.read_at)


class Notification(_ReadStateMixin, models.Model):
    """
    Admin activity feed entry: something a partner did that admins should see.
    """
    LEAD_STATUS_UPDATE = "LEAD_STATUS_UPDATE"
    SALE_RECORDED = "SALE_RECORDED"
    KIT_REQUEST = "KIT_REQUEST"
    TYPE_CHOICES = [
        (LEAD_STATUS_UPDATE, "Lead status update"),
        (SALE_RECORDED, "Sale recorded"),
        (KIT_REQUEST, "Kit request"),
    ]

    type = models.CharField(max_length=32, choices=TYPE_CHOICES, db_index=True)
    message = models.TextField()
    partner = models.ForeignKey(User, on_delete=models.CASCADE, related_name="activity_notifications")
    lead = models.ForeignKey("leads.Lead", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    sale = models.ForeignKey("sales.Sale", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    kit_request = models.ForeignKey("inventory.KitRequest", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-timestamp", "-id"]
        indexes = [
            models.Index(fields=["read_at", "timestamp"], name="notif_read_ts_idx"),
        ]

    def __str__(self):
        return f"Notif<{self.id}> {self.type}"


class PartnerNotification(_ReadStateMixin, models.Model):
    """
    Message addressed to one partner (lead allotted, kits sent, request decided).
    """
    LEAD_ALLOTED = "LEAD_ALLOTED"
    KITS_DISTRIBUTED = "KITS_DISTRIBUTED"
    KIT_REQUEST_APPROVAL = "KIT_REQUEST_APPROVAL"
    TYPE_CHOICES = [
        (LEAD_ALLOTED, "Lead allotted"),
        (KITS_DISTRIBUTED, "Kits distributed"),
        (KIT_REQUEST_APPROVAL, "Kit request decision"),
    ]

    type = models.CharField(max_length=32, choices=TYPE_CHOICES, db_index=True)
    message = models.TextField()
    partner = models.ForeignKey(User, on_delete=models.CASCADE, related_name="partner_notifications", db_index=True)
    lead = models.ForeignKey("leads.Lead", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    kit_distribution = models.ForeignKey("inventory.KitDistribution", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    kit_request = models.ForeignKey("inventory.KitRequest", on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-timestamp", "-id"]
        indexes = [
            models.Index(fields=["partner", "read_at"], name="pnotif_partner_read_idx"),
        ]

    def __str__(self):
        return f"PartnerNotif<{self.id}> {self.type} -> {self.partner_id}"
