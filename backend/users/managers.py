# users/managers.py
from django.contrib.auth.models import BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    """Manager for the email-keyed identity model."""

    use_in_migrations = True

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("An email address is required")
        email = self.normalize_email(email).lower().strip()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        return self.create_user(email, password, **extra_fields)


class AdminQuerySet(models.QuerySet):

    def for_user(self, user):
        """Return the administrator record linked to an identity, or None."""
        if user is None or not getattr(user, "pk", None):
            return None
        return self.filter(user_id=user.pk).order_by("created_at").first()
