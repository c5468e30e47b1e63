import uuid

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from .managers import AdminQuerySet, UserManager
from config.constants import ROLE_CHOICES, DEFAULT_ROLE


class User(AbstractBaseUser, PermissionsMixin):
    """Identity record. Email is the login identifier."""

    email = models.EmailField(unique=True, db_index=True)
    is_active = models.BooleanField(default=True) # Determines if the user can log in
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(auto_now_add=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    def __str__(self):
        return self.email

    def save(self, *args, **kwargs):
        """Ensure email is always saved in lowercase."""
        self.email = self.email.lower().strip()
        super().save(*args, **kwargs)


class Admin(models.Model):
    """
    Administrator record authorizing an identity to use the dashboard.
    Rows are never edited in place; they are created at registration (or by
    `grant_admin`) and removed out-of-band with `revoke_admin`.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="admin_records")
    email = models.EmailField()
    role = models.CharField(
        max_length=20,
        choices=[(role["key"], role["label"]) for role in ROLE_CHOICES],
        default=DEFAULT_ROLE
    )
    created_at = models.DateTimeField(auto_now_add=True, null=True)

    objects = AdminQuerySet.as_manager()

    class Meta:
        db_table = "admins"

    def __str__(self):
        return f"{self.email} ({self.role})"
