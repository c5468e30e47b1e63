# users/permissions.py
from django.conf import settings
from rest_framework.permissions import BasePermission

from .gate import AccessDenied, AccessGate
from .identity import Session


class IsAdministrator(BasePermission):
    """
    View layer of the access gate.

    Re-checks the session resolved by the authentication class against the
    administrator table. On success the administrator record is exposed as
    `request.admin`; otherwise AccessDenied carries the redirect.
    """

    gate_class = AccessGate

    def has_permission(self, request, view):
        gate = self.gate_class()
        session = request.auth if isinstance(request.auth, Session) else None
        decision = gate.authorize(session, request.path)
        if not decision.allowed:
            raise AccessDenied(gate, decision)
        request.admin = decision.admin
        return True


class AnonKeyPermission(BasePermission):
    """Requires the public API key on the `apikey` header when one is configured."""

    message = "Invalid API key"

    def has_permission(self, request, view):
        anon_key = getattr(settings, "ANON_KEY", "")
        if not anon_key:
            return True
        return request.headers.get("apikey") == anon_key
