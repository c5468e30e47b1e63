# backend/businesses/serializers.py
from rest_framework import serializers

from categories.models import Category
from utils.fields import BlankableFloatField, CommaSeparatedListField, NullableCharField, NullableUUIDField
from .models import Business


class BusinessSerializer(serializers.ModelSerializer):
    """Business rows as shown in the dashboard table."""
    category_id = serializers.UUIDField(read_only=True, allow_null=True)
    category_name = serializers.SerializerMethodField()

    class Meta:
        model = Business
        fields = [
            'id', 'name', 'category_id', 'category_name', 'description', 'city', 'address',
            'phone', 'rating', 'latitude', 'longitude', 'images', 'features',
        ]
        read_only_fields = fields

    def get_category_name(self, obj):
        # category_id may point at a deleted category
        try:
            category = obj.category
        except Category.DoesNotExist:
            return None
        return category.name_ar if category else None


class BusinessFormSerializer(serializers.ModelSerializer):
    """
    Serializer behind the business create/edit form.

    Normalizes raw form input: blank optional text becomes null, numbers may
    arrive as strings, features/images are comma separated text. The
    representation uses the same shapes, so resubmitting an unmodified form
    stores an identical row.
    """
    name = serializers.CharField(max_length=255)
    category_id = NullableUUIDField()
    description = NullableCharField()
    city = NullableCharField(max_length=128)
    address = NullableCharField(max_length=255)
    phone = NullableCharField(max_length=32)
    rating = BlankableFloatField(min_value=0, max_value=5)
    latitude = BlankableFloatField()
    longitude = BlankableFloatField()
    features = CommaSeparatedListField()
    images = CommaSeparatedListField()

    class Meta:
        model = Business
        fields = [
            'id', 'name', 'category_id', 'description', 'city', 'address', 'phone',
            'rating', 'latitude', 'longitude', 'features', 'images',
        ]
        read_only_fields = ['id']

    def validate_category_id(self, value):
        # an unchanged id is kept even when its category has since been deleted
        if value is None or (self.instance is not None and value == self.instance.category_id):
            return value
        if not Category.objects.filter(pk=value).exists():
            raise serializers.ValidationError(f'Category "{value}" does not exist.')
        return value
