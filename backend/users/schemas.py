# users/schemas.py
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, inline_serializer
from rest_framework import serializers

# Register schema
register_schema = {
    'operation_id': 'Register',
    'description': """
    Create a dashboard administrator account with email and password.

    The password confirmation and the minimum length (8 characters) are checked
    before anything is written. The identity and its administrator record are
    created in one transaction: if the administrator record cannot be stored,
    the identity is not kept either.
    """,
    'request': {
        "application/json": inline_serializer(
            name='RegisterRequest',
            fields={
                'email': serializers.EmailField(required=True, help_text="Administrator email (used for login)"),
                'password': serializers.CharField(required=True, min_length=8, help_text="Password (min 8 characters)"),
                'confirmPassword': serializers.CharField(required=True, help_text="Must match password"),
            }
        )
    },
    'responses': {
        201: inline_serializer(
            name='RegistrationSuccess',
            fields={
                'message': serializers.CharField(default="Admin account created successfully"),
                'redirect': serializers.CharField(default="/login"),
            }
        ),
        400: OpenApiResponse(
            response=inline_serializer(
                name='RegistrationError',
                fields={'error': serializers.CharField(default="Passwords do not match")},
            ),
            description="Validation failure, duplicate email or administrator record failure."
        ),
    },
    'examples': [
        OpenApiExample(
            'Valid Registration',
            value={'email': 'admin@example.com', 'password': 'secure-pass', 'confirmPassword': 'secure-pass'},
            request_only=True,
        )
    ]
}

# Login schema
login_schema = {
    'operation_id': 'Login',
    'description': """
    Authenticate an administrator.

    On success the session is stored in HttpOnly cookies and the client is
    pointed at the dashboard. Identities without an administrator record are
    signed out immediately and receive an access denied error.
    """,
    'request': {
        "application/json": inline_serializer(
            name='LoginRequest',
            fields={
                'email': serializers.EmailField(),
                'password': serializers.CharField(),
            }
        )
    },
    'responses': {
        200: OpenApiResponse(
            response=inline_serializer(
                name="LoginSuccess",
                fields={
                    "message": serializers.CharField(default="Login successful"),
                    "redirect": serializers.CharField(default="/dashboard"),
                }
            ),
            description="Successful login. Session tokens are set in HttpOnly cookies."
        ),
        400: OpenApiResponse(
            response=inline_serializer(
                name="LoginError",
                fields={"error": serializers.CharField(default="Invalid login credentials")},
            ),
            description="Bad credentials, reported as returned by the identity provider."
        ),
        403: OpenApiResponse(
            response=inline_serializer(
                name="AccessDeniedError",
                fields={"error": serializers.CharField(default="Access denied. Admin approval required.")},
            ),
            description="Valid identity without an administrator record. The session was revoked."
        ),
    },
}

login_page_schema = {
    'operation_id': 'Login Page',
    'description': "Describe the login surface, echoing the redirect parameters set by the access gate.",
    'parameters': [
        OpenApiParameter(name='redirectedFrom', type=str, required=False, description="Originally requested dashboard path"),
        OpenApiParameter(name='error', type=str, required=False, description="`access_denied` after a forced sign-out"),
    ],
    'responses': {
        200: inline_serializer(
            name="LoginPage",
            fields={
                "fields": serializers.ListField(child=serializers.CharField()),
                "redirectedFrom": serializers.CharField(allow_null=True),
                "error": serializers.CharField(allow_null=True),
            }
        ),
    },
}

logout_schema = {
    'operation_id': 'Logout',
    'description': "Revoke the current session and clear the session cookies.",
    'request': None,
    'responses': {
        200: inline_serializer(
            name="LogoutSuccess",
            fields={"message": serializers.CharField(default="Logged out successfully")},
        ),
    },
}
