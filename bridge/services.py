"""
Bridge from informal interactions (public chat, bookings) to formal cases.

Bridge cases are filed against a shared guest patient, go through the normal
``CaseService`` intake checks, are submitted for review straight away and
then handed to the AI pipeline without waiting for it. A failure here never
breaks the chat or booking flow: it is logged and the caller gets ``None``.
"""
import json
import logging

from cases.enums import CasePriority, CaseSource
from cases.models import Case
from cases.safety import check_emergency, sanitize, validate_content_safety
from cases.services.case_service import get_case_service
from clinical_ai.services.pipeline import get_processor
from patients.services import get_or_create_guest_patient
from .intent import MIN_CASE_CONFIDENCE, Intent

logger = logging.getLogger(__name__)

CHAT_DISCLAIMER = "This is general guidance only. Consult a doctor for medical advice."
CHAT_EMERGENCY_MESSAGE = (
    "URGENT: Your symptoms may require immediate medical attention. "
    "Please contact emergency services or visit the nearest hospital immediately."
)
EMPTY_MESSAGE_REPLY = "I didn't catch that. Could you say it again?"
GREETING_WORDS = {"hello", "hi", "hey", "namaste"}

CHAT_REPLIES = {
    "stress": (
        "I understand. For stress and sleep, Ayurveda traditionally uses Ashwagandha to support "
        "relaxation and sleep quality. A specialist in stress management therapies can guide you further. "
        "Would you like to book a consultation?"
    ),
    "gastric": (
        "For digestive discomfort, Triphala is traditionally used for gut health. "
        "A specialist in digestive care (Kayachikitsa) can review your symptoms in detail."
    ),
    "cardiac": (
        "For heart health and blood pressure, a cardiologist who combines modern and ayurvedic care can help. "
        "Arjunarishta is a traditional tonic for heart strength. "
        "If you are experiencing chest pain or difficulty breathing, please seek immediate emergency care."
    ),
    "pain": (
        "For pain relief, Mahanarayan oil is a traditional Ayurvedic oil for joint and muscle discomfort. "
        "A general physician can provide a comprehensive pain assessment."
    ),
    "skin": (
        "For skin concerns, neem and turmeric are traditionally valued for their soothing properties. "
        "A dermatologist can examine the affected area."
    ),
    "respiratory": (
        "For respiratory symptoms, Tulsi (holy basil) and ginger with honey are traditionally used to soothe "
        "the throat. A general physician can evaluate your breathing and throat."
    ),
}
GREETING_REPLY = (
    "Namaste! I am the Ayurvaidya assistant. I can help you find remedies or specialists. "
    "How are you feeling today?"
)
FALLBACK_REPLY = "I can help with that! Are you looking for a specific remedy or to consult a specialist?"


def chief_complaint_for(intent: Intent, message: str, emergency_triggers=()) -> str:
    """
    Only known keywords or content-safe text reach the complaint; the full
    message is kept in raw notes so a case is never rejected for its wording.
    """
    reported = intent.symptoms or list(emergency_triggers)
    if reported:
        return f"Patient reports: {', '.join(reported)}"
    excerpt = message[:100]
    if excerpt and validate_content_safety(excerpt).safe:
        return f"General health inquiry: {excerpt}"
    return "General health inquiry via chat"


def _file_bridge_case(data: dict, source) -> Case | None:
    """Create, auto-submit and queue processing. Returns None on any rejection."""
    service = get_case_service()
    created = service.submit_case(data, source=source)
    if not created.success:
        logger.warning(f"Bridge ({source}): case rejected {created.error}: {created.message}")
        return None

    case_id = created.data["id"]
    submitted = service.submit_for_review(case_id)
    if not submitted.success:
        logger.warning(f"Bridge ({source}): could not submit {case_id}: {submitted.message}")

    triggered = get_processor().process(case_id)
    if not triggered.success:
        logger.warning(f"Bridge ({source}): AI processing not started for {case_id}: {triggered.message}")

    logger.info(f"Bridge ({source}): created case {case_id}")
    return service.cases.find_by_id(case_id)


def create_case_from_chat(message, intent: Intent) -> Case | None:
    """File a case for a chat message the classifier is confident about."""
    if intent.confidence < MIN_CASE_CONFIDENCE:
        return None

    cleaned = sanitize(message) or ""
    emergency = check_emergency(cleaned)
    priority = CasePriority.URGENT if emergency.is_emergency else CasePriority.ROUTINE
    patient = get_or_create_guest_patient()

    raw_notes = json.dumps({
        "source": CaseSource.CHAT_BRIDGE.value,
        "originalMessage": cleaned[:2000],
        "inferredCategory": intent.category,
        "detectedSymptoms": intent.symptoms,
        "confidence": intent.confidence,
        "emergencyFlags": emergency.triggers,
    })
    return _file_bridge_case({
        "patientId": patient.id,
        "chiefComplaint": chief_complaint_for(intent, cleaned, emergency.triggers),
        "symptomDuration": "Unknown (via chat)",
        "rawNotes": raw_notes,
        "priority": priority,
    }, CaseSource.CHAT_BRIDGE)


def create_case_from_booking(booking: dict) -> Case | None:
    patient = get_or_create_guest_patient()
    doctor, specialty = booking.get("doctorName"), booking.get("specialty")
    if doctor:
        chief_complaint = f"Consultation booking with {doctor}" + (f" ({specialty})" if specialty else "")
    else:
        chief_complaint = "General consultation booking"

    raw_notes = json.dumps({
        "source": CaseSource.BOOKING_BRIDGE.value,
        "bookingId": booking.get("id"),
        "doctorId": booking.get("doctorId"),
        "scheduledDate": booking.get("date"),
        "scheduledTime": booking.get("time"),
        "consultationType": booking.get("type"),
    }, default=str)
    return _file_bridge_case({
        "patientId": patient.id,
        "chiefComplaint": chief_complaint,
        "symptomDuration": "Pending consultation",
        "rawNotes": raw_notes,
        "priority": CasePriority.ROUTINE,
    }, CaseSource.BOOKING_BRIDGE)


def check_chat_emergency(message) -> dict:
    emergency = check_emergency(message)
    if not emergency.is_emergency:
        return {"isEmergency": False}
    return {"isEmergency": True, "message": CHAT_EMERGENCY_MESSAGE, "triggers": emergency.triggers}


def apply_chat_safety(reply: str) -> dict:
    """Scan an outgoing chat reply and always append the short disclaimer."""
    verdict = validate_content_safety(reply)
    return {
        "safe": verdict.safe,
        "response": f"{reply}\n\n{CHAT_DISCLAIMER}",
        "warnings": list(verdict.violations),
    }


def build_chat_reply(message, intent: Intent) -> str:
    words = set(str(message or "").lower().replace("!", " ").replace(",", " ").split())
    if words & GREETING_WORDS:
        return GREETING_REPLY
    return CHAT_REPLIES.get(intent.category, FALLBACK_REPLY)


def get_bridge_stats() -> dict:
    chat = booking = emergencies = 0
    for source, raw_notes in Case.objects.filter(
        source__in=[CaseSource.CHAT_BRIDGE, CaseSource.BOOKING_BRIDGE]
    ).values_list("source", "raw_notes"):
        if source == CaseSource.CHAT_BRIDGE:
            chat += 1
        else:
            booking += 1
        try:
            notes = json.loads(raw_notes or "{}")
        except ValueError:
            continue
        if isinstance(notes, dict) and notes.get("emergencyFlags"):
            emergencies += 1

    return {
        "totalBridgeCases": chat + booking,
        "fromBookings": booking,
        "fromChat": chat,
        "emergencyEscalations": emergencies,
    }
