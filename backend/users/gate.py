# users/gate.py
"""
Access gate for the /dashboard route tree.

The same decision is evaluated twice per request: once by
`AdminAccessMiddleware` before routing, and once by the `IsAdministrator`
permission inside every dashboard view. Each layer builds its own gate and
re-reads the session and administrator record itself.
"""
import logging
from urllib.parse import urlencode

from django.http import HttpResponseRedirect
from rest_framework.exceptions import PermissionDenied

from config.constants import ACCESS_DENIED, ACCESS_DENIED_MESSAGE, DASHBOARD_URL, LOGIN_URL
from .identity import IdentityProvider
from .models import Admin

logger = logging.getLogger(__name__)

AUTHORIZED = "authorized"
UNAUTHENTICATED = "unauthenticated"
DENIED = "denied"


def is_protected_path(path):
    return path == DASHBOARD_URL or path.startswith(DASHBOARD_URL + "/")


def login_url(**params):
    return f"{LOGIN_URL}?{urlencode(params)}" if params else LOGIN_URL


class GateDecision:
    """Outcome of one gate evaluation."""

    def __init__(self, state, session=None, admin=None, redirect_to=None, signed_out=False):
        self.state = state
        self.session = session
        self.admin = admin
        self.redirect_to = redirect_to
        self.signed_out = signed_out

    @property
    def allowed(self):
        return self.state == AUTHORIZED

    def __repr__(self):
        return f"<GateDecision {self.state} redirect_to={self.redirect_to!r}>"


class AccessDenied(PermissionDenied):
    """Raised from the view layer when the gate rejects a request."""
    default_detail = ACCESS_DENIED_MESSAGE

    def __init__(self, gate, decision):
        super().__init__()
        self.gate = gate
        self.decision = decision

    def as_response(self):
        return self.gate.redirect(self.decision)


class AccessGate:
    """
    Decides whether a request may reach a dashboard page.

    Collaborators are passed in so the gate can run against any identity
    provider / authorization store pair:

    - identity: object with get_session(request) and sign_out(session)
    - admins: queryset-like object with for_user(user)
    """

    def __init__(self, identity=None, admins=None):
        self.identity = identity or IdentityProvider()
        self.admins = admins if admins is not None else Admin.objects

    def check(self, request):
        """Resolve the session from the request, then authorize it."""
        return self.authorize(self.identity.get_session(request), request.path)

    def authorize(self, session, path):
        if session is None:
            logger.info(f"No session for {path}, redirecting to login")
            return GateDecision(UNAUTHENTICATED, redirect_to=login_url(redirectedFrom=path))

        admin = self.admins.for_user(session.user)
        if admin is None:
            logger.warning(f"User {session.user.pk} has no administrator record, forcing sign-out")
            self.identity.sign_out(session)
            return GateDecision(
                DENIED,
                session=session,
                redirect_to=login_url(error=ACCESS_DENIED),
                signed_out=True,
            )

        return GateDecision(AUTHORIZED, session=session, admin=admin)

    def redirect(self, decision):
        """Build the redirect response for a rejected decision."""
        response = HttpResponseRedirect(decision.redirect_to)
        if decision.signed_out:
            self.identity.clear_session(response)
        return response
