import logging
from dataclasses import replace

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.permissions import IsStaff
from .intent import infer_intent
from .serializers import BookingSerializer, ChatMessageSerializer
from .services import (
    EMPTY_MESSAGE_REPLY,
    apply_chat_safety,
    build_chat_reply,
    check_chat_emergency,
    create_case_from_booking,
    create_case_from_chat,
    get_bridge_stats,
)

logger = logging.getLogger(__name__)


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def chat(request):
    """
    Public chat widget. Meaningful messages silently become cases; the reply
    is canned guidance that always carries a short disclaimer.
    """
    s = ChatMessageSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    message = s.validated_data.get("message") or ""
    if not message:
        return Response({"reply": EMPTY_MESSAGE_REPLY})

    intent = infer_intent(message)
    logger.info(f"Bridge chat intent {intent.category} ({intent.confidence}%)")

    emergency = check_chat_emergency(message)
    if emergency["isEmergency"]:
        # always tracked, whatever the classifier thought
        case = create_case_from_chat(message, replace(intent, confidence=100))
        return Response({
            "reply": emergency["message"],
            "emergency": True,
            "caseId": getattr(case, "id", None),
        })

    case = create_case_from_chat(message, intent)
    safe = apply_chat_safety(build_chat_reply(message, intent))
    if not safe["safe"]:
        logger.warning(f"Chat reply flagged: {safe['warnings']}")
    return Response({
        "reply": safe["response"],
        "intent": intent.as_dict(),
        "caseId": getattr(case, "id", None),
    })


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def bookings(request):
    s = BookingSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    case = create_case_from_booking(s.validated_data)
    return Response(
        {"bookingId": s.validated_data["id"], "caseId": getattr(case, "id", None)},
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated, IsStaff])
def stats(request):
    return Response({"success": True, "data": get_bridge_stats()})
