from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class CustomUserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.ROLE_ADMIN)
        if extra_fields.get("is_staff") is not True or extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_staff=True and is_superuser=True.")
        return self._create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    # Login is by email; username is kept only for admin display and may be empty.
    username = models.CharField(max_length=150, unique=True, null=True, blank=True)
    email = models.EmailField(unique=True)

    ROLE_ADMIN = 'admin'
    ROLE_PARTNER = 'partner'
    ROLE_USER = 'user'
    ROLE_SUPPORT = 'support'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_PARTNER, 'Partner'),
        (ROLE_USER, 'User'),
        (ROLE_SUPPORT, 'Support'),
    ]

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_USER, db_index=True)
    name = models.CharField(max_length=150, blank=True)
    phone_number = models.CharField(max_length=20, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    pincode = models.CharField(max_length=10, blank=True, db_index=True)
    google_id = models.CharField(max_length=255, blank=True, null=True, unique=True)
    is_profile_complete = models.BooleanField(default=False)

    # Fields that must all be non-blank for a profile to count as complete
    PROFILE_FIELDS = ('name', 'phone_number', 'city', 'state', 'pincode')

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ['-date_joined']

    def __str__(self):
        return f"{self.name or self.email} ({self.role})"

    @property
    def is_partner(self):
        return self.role == self.ROLE_PARTNER

    @property
    def is_portal_admin(self):
        return self.role == self.ROLE_ADMIN or self.is_staff or self.is_superuser

    def profile_is_complete(self) -> bool:
        return all(str(getattr(self, f, "") or "").strip() for f in self.PROFILE_FIELDS)

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        if self.google_id == "":
            self.google_id = None
        super().save(*args, **kwargs)
