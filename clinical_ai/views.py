import logging

from django.db import DatabaseError, connection
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.permissions import IsReviewer, IsStaff
from core.results import as_response
from .enums import ProcessingOutcome
from .services.pipeline import delivery_mode, get_processor

logger = logging.getLogger(__name__)

# a trigger that hands work to a thread or worker answers 202
DEFERRED_OUTCOMES = {ProcessingOutcome.STARTED.value, ProcessingOutcome.QUEUED.value}


@api_view(["POST"])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated, IsStaff])
def process_case(request, case_id):
    result = get_processor().process(case_id, mode=request.query_params.get("mode"))
    deferred = result.success and (result.data or {}).get("status") in DEFERRED_OUTCOMES
    return as_response(result, success_status=status.HTTP_202_ACCEPTED if deferred else status.HTTP_200_OK)


@api_view(["GET"])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated, IsStaff])
def processing_status(request, case_id):
    return as_response(get_processor().get_processing_status(case_id))


@api_view(["GET", "DELETE"])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated, IsStaff])
def recommendation(request, case_id):
    processor = get_processor()
    if request.method == "DELETE":
        if not IsReviewer().has_permission(request, None):
            return Response({"detail": "Only doctors can discard a recommendation."}, status=status.HTTP_403_FORBIDDEN)
        return as_response(processor.delete_recommendation(case_id))
    return as_response(processor.get_recommendation(case_id))


@api_view(["GET"])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated, IsStaff])
def summary(request, case_id):
    return as_response(get_processor().get_summary(case_id))


@api_view(["GET"])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated])
def pipeline(request):
    return as_response(get_processor().pipeline_info())


@api_view(["GET"])
@permission_classes([AllowAny])
def health(request):
    db_ok = True
    try:
        with connection.cursor() as cur:
            cur.execute("SELECT 1")
    except DatabaseError as e:
        logger.error(f"Health check database failure: {e}")
        db_ok = False

    processor = get_processor()
    body = {
        "status": "ok" if db_ok else "degraded",
        "database": db_ok,
        "aiAvailable": processor.generator.is_available,
        "mode": delivery_mode(),
    }
    return Response(body, status=status.HTTP_200_OK if db_ok else status.HTTP_503_SERVICE_UNAVAILABLE)
