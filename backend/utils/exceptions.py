# utils/exceptions.py
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from rest_framework.views import exception_handler

from users.gate import AccessDenied

logger = logging.getLogger(__name__)


def dashboard_exception_handler(exc, context):
    """
    DRF exception handler.

    - Access gate rejections turn into the login redirect.
    - Database errors are reported with their raw message instead of a 500.
    - Not found (e.g. a page past the end of a list) uses the same {"error": ...} shape as the views.
    """
    if isinstance(exc, AccessDenied):
        return exc.as_response()

    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception(f"Data store error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
        return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, NotFound):
        return Response({"error": str(exc.detail)}, status=status.HTTP_404_NOT_FOUND)

    return exception_handler(exc, context)
