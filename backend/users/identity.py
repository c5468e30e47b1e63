# users/identity.py
"""
Identity provider.

Issues, validates and revokes dashboard sessions. A session is a simplejwt
refresh token (tracked by the token blacklist app) plus an access token that
carries the refresh token's jti in its `sid` claim. The access token travels in
an HttpOnly cookie; revoking a session blacklists the refresh token, after
which every access token minted from it stops validating.
"""
import logging

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

logger = logging.getLogger(__name__)

SESSION_CLAIM = "sid"


class IdentityError(Exception):
    """Raised when the identity provider rejects a sign-in or sign-up."""


class Session:
    """An authenticated identity and the tokens that represent it."""

    def __init__(self, user, session_id, access_token=None, refresh_token=None):
        self.user = user
        self.session_id = session_id
        self.access_token = access_token
        self.refresh_token = refresh_token

    def __repr__(self):
        return f"<Session {self.session_id} user={self.user.pk}>"


class IdentityProvider:
    """Password identities backed by the Django user model and simplejwt tokens."""

    def __init__(self, user_model=None):
        self.user_model = user_model or get_user_model()

    def sign_up(self, email, password):
        """Create a new identity. Raises IdentityError if the email is taken."""
        email = (email or "").lower().strip()
        if self.user_model.objects.filter(email=email).exists():
            raise IdentityError("User already registered")
        return self.user_model.objects.create_user(email=email, password=password)

    def sign_in_with_password(self, email, password):
        """Authenticate credentials and open a new session."""
        user = authenticate(email=(email or "").lower().strip(), password=password)
        if user is None:
            raise IdentityError("Invalid login credentials")
        return self.open_session(user)

    def open_session(self, user):
        refresh = RefreshToken.for_user(user)
        access = refresh.access_token
        access[SESSION_CLAIM] = refresh[api_settings.JTI_CLAIM]
        return Session(
            user=user,
            session_id=refresh[api_settings.JTI_CLAIM],
            access_token=str(access),
            refresh_token=str(refresh),
        )

    def get_session(self, request):
        """Validate the session cookie on a request. Returns None when there is no live session."""
        raw_token = request.COOKIES.get(settings.SIMPLE_JWT["AUTH_COOKIE"])
        if not raw_token:
            return None

        try:
            token = AccessToken(raw_token)
        except TokenError as e:
            logger.info(f"Rejected session cookie: {e}")
            return None

        session_id = token.get(SESSION_CLAIM)
        if not session_id or self.is_revoked(session_id):
            return None

        user = self.user_model.objects.filter(
            pk=token.get(api_settings.USER_ID_CLAIM), is_active=True
        ).first()
        if user is None:
            return None

        return Session(user=user, session_id=session_id, access_token=raw_token)

    def is_revoked(self, session_id):
        return BlacklistedToken.objects.filter(token__jti=session_id).exists()

    def sign_out(self, session):
        """Revoke a session for good. Safe to call more than once."""
        outstanding = OutstandingToken.objects.filter(jti=session.session_id).first()
        if outstanding is None:
            logger.warning(f"No outstanding token for session {session.session_id}")
            return
        BlacklistedToken.objects.get_or_create(token=outstanding)
        logger.info(f"Session {session.session_id} revoked for user {session.user.pk}")

    def attach_session(self, response, session):
        """Set the session cookies on a response."""
        jwt_settings = settings.SIMPLE_JWT
        response.set_cookie(
            key=jwt_settings["AUTH_COOKIE"],
            value=session.access_token,
            httponly=jwt_settings["AUTH_COOKIE_HTTP_ONLY"],
            secure=jwt_settings["AUTH_COOKIE_SECURE"],
            samesite=jwt_settings["AUTH_COOKIE_SAMESITE"],
            path=jwt_settings["AUTH_COOKIE_PATH"],
            max_age=int(api_settings.ACCESS_TOKEN_LIFETIME.total_seconds()),
        )
        if session.refresh_token:
            response.set_cookie(
                key=jwt_settings["AUTH_COOKIE_REFRESH"],
                value=session.refresh_token,
                httponly=True,
                secure=jwt_settings["AUTH_COOKIE_SECURE"],
                samesite=jwt_settings["AUTH_COOKIE_SAMESITE"],
                path=jwt_settings["AUTH_COOKIE_PATH"],
                max_age=int(api_settings.REFRESH_TOKEN_LIFETIME.total_seconds()),
            )
        return response

    def clear_session(self, response):
        """Expire the session cookies on a response."""
        jwt_settings = settings.SIMPLE_JWT
        for key in (jwt_settings["AUTH_COOKIE"], jwt_settings["AUTH_COOKIE_REFRESH"]):
            response.delete_cookie(
                key,
                path=jwt_settings["AUTH_COOKIE_PATH"],
                samesite=jwt_settings["AUTH_COOKIE_SAMESITE"],
            )
        return response
