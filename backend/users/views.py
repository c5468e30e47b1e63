from django.db import DatabaseError, transaction
from rest_framework import status
from rest_framework.parsers import JSONParser
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema
import logging

from config.constants import ACCESS_DENIED, ACCESS_DENIED_MESSAGE, DASHBOARD_URL, DEFAULT_ROLE, LOGIN_URL
from .authentication import SessionCookieAuthentication
from .identity import IdentityError, IdentityProvider, Session
from .models import Admin
from .permissions import AnonKeyPermission
from .schemas import login_page_schema, login_schema, logout_schema, register_schema
from .serializers import LoginSerializer, RegisterSerializer

# Setup logger for debugging and tracking requests
logger = logging.getLogger(__name__)


class AdminRecordError(Exception):
    """The identity exists but its administrator record could not be stored."""


def first_error(errors):
    """First message out of a serializer error dict, as a plain string."""
    messages = next(iter(errors.values()))
    return str(messages[0] if isinstance(messages, list) else messages)


class IdentityViewMixin:
    identity_provider_class = IdentityProvider

    @property
    def identity(self):
        if not hasattr(self, "_identity"):
            self._identity = self.identity_provider_class()
        return self._identity


class RegisterView(IdentityViewMixin, APIView):
    """
    API for administrator registration.
    Creates the identity and its administrator record together.
    """
    authentication_classes = []
    permission_classes = [AnonKeyPermission]
    parser_classes = [JSONParser]

    @extend_schema(**register_schema)
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)
        email = serializer.validated_data['email']

        try:
            with transaction.atomic():
                user = self.identity.sign_up(email, serializer.validated_data['password'])
                self.create_admin_record(user)
        except (IdentityError, AdminRecordError) as e:
            logger.info(f"Registration rejected for {email}: {e}")
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Administrator registered: {email}")
        return Response(
            {"message": "Admin account created successfully", "redirect": LOGIN_URL},
            status=status.HTTP_201_CREATED
        )

    def create_admin_record(self, user):
        try:
            return Admin.objects.create(user=user, email=user.email, role=DEFAULT_ROLE)
        except DatabaseError as e:
            logger.exception(f"Failed to create admin record for user {user.pk}")
            raise AdminRecordError(f"Failed to create admin record: {e}") from e


class LoginView(IdentityViewMixin, APIView):
    """
    API for administrator authentication.
    - Sets the session tokens in HttpOnly cookies when the identity is an administrator
    - Revokes the freshly opened session otherwise
    """
    authentication_classes = []
    permission_classes = [AnonKeyPermission]
    parser_classes = [JSONParser]

    @extend_schema(**login_page_schema)
    def get(self, request):
        """Describe the login form, surfacing the parameters added by the access gate."""
        error = request.query_params.get("error")
        return Response({
            "fields": ["email", "password"],
            "redirectedFrom": request.query_params.get("redirectedFrom"),
            "error": ACCESS_DENIED_MESSAGE if error == ACCESS_DENIED else None,
        })

    @extend_schema(**login_schema)
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            session = self.identity.sign_in_with_password(
                serializer.validated_data['email'],
                serializer.validated_data['password'],
            )
        except IdentityError as e:
            logger.info(f"Login failed for {serializer.validated_data['email']}: {e}")
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        if Admin.objects.for_user(session.user) is None:
            self.identity.sign_out(session)
            logger.warning(f"Login by non-administrator {session.user.email} denied")
            return Response({"error": ACCESS_DENIED_MESSAGE}, status=status.HTTP_403_FORBIDDEN)

        # redirectedFrom is not followed; administrators always land on the dashboard
        response = Response({"message": "Login successful", "redirect": DASHBOARD_URL}, status=status.HTTP_200_OK)
        return self.identity.attach_session(response, session)


class LogoutView(IdentityViewMixin, APIView):
    """
    API for logout.
    - Revokes the current session, if any
    - Deletes the session cookies
    """
    authentication_classes = [SessionCookieAuthentication]
    permission_classes = [AnonKeyPermission]

    @extend_schema(**logout_schema)
    def post(self, request):
        if isinstance(request.auth, Session):
            self.identity.sign_out(request.auth)

        response = Response({"message": "Logged out successfully"}, status=status.HTTP_200_OK)
        return self.identity.clear_session(response)
