import logging

from django.conf import settings
from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from .results import ErrorKind, ServiceResult

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    DRF handles its own APIExceptions. Anything else that escapes a view
    (database faults, programming errors) becomes a generic error envelope;
    the underlying message is only exposed when DEBUG is on.
    """
    response = drf_exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if isinstance(exc, DatabaseError):
        logger.exception(f"Database error in {view_name}")
        kind = ErrorKind.DATABASE_ERROR
        public_message = "A database error occurred"
    else:
        logger.exception(f"Unhandled error in {view_name}")
        kind = ErrorKind.INTERNAL_ERROR
        public_message = "Internal server error"

    message = str(exc) if settings.DEBUG else public_message
    result = ServiceResult.fail(kind, message)
    return Response(result.to_dict(), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
