from rest_framework import serializers

from config.constants import MIN_PASSWORD_LENGTH
from .models import Admin


class RegisterSerializer(serializers.Serializer):
    """
    Serializer for administrator registration with email & password.

    Only local checks happen here (email format, password confirmation and
    length), so a rejected submission never reaches the database. Creating the
    identity and the administrator record is the view's job.
    """
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    confirmPassword = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, data):
        if data['password'] != data['confirmPassword']:
            raise serializers.ValidationError({"error": "Passwords do not match"})

        if len(data['password']) < MIN_PASSWORD_LENGTH:
            raise serializers.ValidationError(
                {"error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"}
            )

        return data


class LoginSerializer(serializers.Serializer):
    """Credentials for password login. Authentication itself is done by the identity provider."""
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class AdminSerializer(serializers.ModelSerializer):

    class Meta:
        model = Admin
        fields = ['id', 'email', 'role', 'created_at']
        read_only_fields = fields
