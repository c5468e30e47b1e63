# utils/fields.py
"""Serializer fields that normalize raw form input."""
from rest_framework import serializers

from .text import join_comma_separated, split_comma_separated


class NullableCharField(serializers.CharField):
    """Optional text. Blank input is stored as null."""

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_blank", True)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def run_validation(self, data=serializers.empty):
        value = super().run_validation(data)
        return value or None


class BlankableFloatField(serializers.FloatField):
    """Numeric input that accepts numbers or numeric strings; blank means null."""

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if isinstance(data, str) and not data.strip():
            data = None
        return super().validate_empty_values(data)


class CommaSeparatedListField(serializers.Field):
    """
    List of strings entered as comma separated text.

    Accepts either a string ("wifi, parking") or a list. Segments are trimmed
    and empty segments dropped; nothing left means null. Renders back as the
    comma separated text so an unmodified form resubmits to the same list.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, (list, tuple)):
            if not all(isinstance(item, str) for item in data):
                raise serializers.ValidationError("Expected a list of strings.")
            # list items are kept whole, commas included
            segments = [item.strip() for item in data if item.strip()]
        elif isinstance(data, str):
            segments = split_comma_separated(data)
        else:
            raise serializers.ValidationError("Expected comma separated text.")
        return segments or None

    def to_representation(self, value):
        return join_comma_separated(value)


class NullableUUIDField(serializers.UUIDField):
    """Optional id reference; blank input means null."""

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if isinstance(data, str) and not data.strip():
            data = None
        return super().validate_empty_values(data)
