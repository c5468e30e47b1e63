# utils/service_role.py
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


def require_service_role_key():
    """
    Return the privileged service key, failing fast when it is not configured.

    Every service role operation calls this before touching data.
    """
    service_key = getattr(settings, "SERVICE_ROLE_KEY", "")
    if not service_key:
        raise ImproperlyConfigured("SERVICE_ROLE_KEY is required for service role operations.")
    return service_key
