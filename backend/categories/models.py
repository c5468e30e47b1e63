# categories/models.py
import uuid

from django.db import models


class Category(models.Model):
    """Directory category. The Arabic name is the display name."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name_ar = models.CharField(max_length=255)
    name_en = models.CharField(max_length=255, blank=True, null=True)
    icon = models.CharField(max_length=64, blank=True, null=True)  # Icon identifier, e.g. "sparkles"

    class Meta:
        db_table = "categories"
        ordering = ["name_ar"]

    def __str__(self):
        return self.name_en or self.name_ar
