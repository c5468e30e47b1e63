# users/middleware.py
import logging

from django.utils.cache import add_never_cache_headers

from .gate import AccessGate, is_protected_path

logger = logging.getLogger(__name__)


class AdminAccessMiddleware:
    """
    Edge layer of the access gate.

    Runs before URL resolution for every request under /dashboard. The views
    behind it still run their own check through `IsAdministrator`.
    """

    gate_class = AccessGate

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not is_protected_path(request.path):
            return self.get_response(request)

        gate = self.gate_class()
        decision = gate.check(request)
        if not decision.allowed:
            return gate.redirect(decision)

        response = self.get_response(request)
        add_never_cache_headers(response)
        return response
