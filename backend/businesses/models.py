# backend/businesses/models.py
import uuid

from django.db import models
from categories.models import Category


class Business(models.Model):
    """
    Business listed in the directory.

    The category link is a soft reference: there is no database constraint and
    deleting a category leaves category_id untouched on its businesses.
    Rating is expected in [0, 5]; the range is checked by the form serializer only.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    category = models.ForeignKey(
        Category,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        blank=True,
        null=True,
        related_name="businesses",
    )
    description = models.TextField(blank=True, null=True)
    city = models.CharField(max_length=128, blank=True, null=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    rating = models.FloatField(blank=True, null=True)
    latitude = models.FloatField(blank=True, null=True)
    longitude = models.FloatField(blank=True, null=True)
    images = models.JSONField(blank=True, null=True)  # Ordered list of image URLs
    features = models.JSONField(blank=True, null=True)  # Ordered list of feature tags

    class Meta:
        db_table = "businesses"
        ordering = ["name"]

    def __str__(self):
        return self.name or "Unnamed Business"
