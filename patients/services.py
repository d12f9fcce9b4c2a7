import logging

from django.conf import settings

from .enums import Gender
from .models import Patient

logger = logging.getLogger(__name__)

GUEST_PATIENT_DEFAULTS = {
    "full_name": "Bridge Guest User",
    "age": 30,
    "gender": Gender.OTHER,
    "phone": "0000000000",
    "district": "Online",
    "state": "Digital",
}


class PatientLookup:
    """Read-only patient access used by the case service."""

    def get_by_id(self, patient_id) -> Patient | None:
        if not patient_id:
            return None
        return Patient.objects.filter(pk=str(patient_id)).first()


def get_or_create_guest_patient() -> Patient:
    """
    Shared placeholder patient for anonymous chat / booking intake.
    """
    guest_id = getattr(settings, "BRIDGE_GUEST_PATIENT_ID", "guest_bridge")
    patient, created = Patient.objects.get_or_create(id=guest_id, defaults=GUEST_PATIENT_DEFAULTS)
    if created:
        logger.info(f"Created bridge guest patient {guest_id}")
    return patient
