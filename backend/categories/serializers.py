# categories/serializers.py
from rest_framework import serializers

from utils.fields import NullableCharField
from .models import Category


class CategorySerializer(serializers.ModelSerializer):
    """Category rows and the category form. Optional names/icons are stored as null when blank."""
    name_ar = serializers.CharField(max_length=255)
    name_en = NullableCharField(max_length=255)
    icon = NullableCharField(max_length=64)

    class Meta:
        model = Category
        fields = ['id', 'name_ar', 'name_en', 'icon']
        read_only_fields = ['id']


class CategoryOptionSerializer(serializers.ModelSerializer):
    """Slim representation used to fill category pickers."""

    class Meta:
        model = Category
        fields = ['id', 'name_ar']
