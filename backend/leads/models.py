from django.conf import settings
from django.db import models


class Lead(models.Model):
    PLATFORM_CHOICES = [
        ('Facebook', 'Facebook'),
        ('Instagram', 'Instagram'),
        ('Twitter', 'Twitter'),
        ('LinkedIn', 'LinkedIn'),
        ('YouTube', 'YouTube'),
    ]
    STATUS_NEW = 'new'
    STATUS_CONTACTED = 'contacted'
    STATUS_SUCCESSFUL = 'successful'
    STATUS_LOST = 'lost'
    STATUS_CHOICES = [
        (STATUS_NEW, 'New'),
        (STATUS_CONTACTED, 'Contacted'),
        (STATUS_SUCCESSFUL, 'Successful'),
        (STATUS_LOST, 'Lost'),
    ]

    name = models.CharField(max_length=150)
    mobile_no = models.CharField(max_length=20)
    email = models.EmailField()
    city = models.CharField(max_length=100)
    platform = models.CharField(max_length=20, choices=PLATFORM_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_NEW, db_index=True)
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name='leads'
    )
    # Filled in when the lead converts into a sale
    address = models.TextField(blank=True)
    state = models.CharField(max_length=100, blank=True)
    pincode = models.CharField(max_length=10, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['assigned_to', 'status'], name='lead_assignee_status_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.mobile_no})"
