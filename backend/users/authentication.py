# users/authentication.py
from rest_framework.authentication import BaseAuthentication

from .identity import IdentityProvider


class SessionCookieAuthentication(BaseAuthentication):
    """
    Resolves the session cookie into (user, session).

    A missing, expired or revoked session leaves the request anonymous instead
    of failing; the access gate decides what happens to anonymous requests.
    """

    identity_provider_class = IdentityProvider

    def authenticate(self, request):
        session = self.identity_provider_class().get_session(request)
        if session is None:
            return None
        return (session.user, session)
