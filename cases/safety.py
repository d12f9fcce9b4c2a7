"""
Safety rules for the case workflow.

Static tables (status graph, prohibited language, emergency keywords) plus
pure predicates over them. Nothing in here touches the database.
"""
import re
from dataclasses import dataclass, field

from .enums import CasePriority, CaseStatus


# ---------------------------------------------------------------------
# Status graph
# ---------------------------------------------------------------------
STATUS_TRANSITIONS = {
    CaseStatus.DRAFT: (CaseStatus.PENDING_REVIEW,),
    CaseStatus.PENDING_REVIEW: (CaseStatus.REVIEWED, CaseStatus.DRAFT),
    CaseStatus.REVIEWED: (CaseStatus.CLOSED, CaseStatus.PENDING_REVIEW),
    CaseStatus.CLOSED: (),
}


def get_allowed_transitions(status) -> list[str]:
    return [str(s) for s in STATUS_TRANSITIONS.get(status, ())]


def is_valid_transition(from_status, to_status) -> bool:
    # unknown source status has no edges
    return to_status in STATUS_TRANSITIONS.get(from_status, ())


# ---------------------------------------------------------------------
# Prohibited language
# ---------------------------------------------------------------------
PROHIBITED_DIAGNOSIS_TERMS = (
    "you have",
    "diagnosed with",
    "diagnosis is",
    "diagnosis:",
    "confirmed",
    "definitely",
    "certainly",
    "you are suffering from",
    "patient has",
    "prescribe",
    "prescription",
    "take this medicine",
    "take this medication",
    "dosage:",
    "mg twice daily",
    "mg once daily",
    "tablets daily",
    "must take",
    "should take",
)

PROHIBITED_MEDICAL_CLAIMS = (
    "will cure",
    "guaranteed to",
    "proven to cure",
    "will heal",
    "miracle",
    "100% effective",
    "no side effects",
)


@dataclass(frozen=True)
class SafetyVerdict:
    safe: bool
    violations: list = field(default_factory=list)


def validate_content_safety(text) -> SafetyVerdict:
    """
    Case-insensitive substring scan of both prohibited lists. Every matched
    term is reported verbatim, diagnosis terms first.
    """
    if not text or not isinstance(text, str):
        return SafetyVerdict(safe=True, violations=[])

    lowered = text.lower()
    violations = [t for t in PROHIBITED_DIAGNOSIS_TERMS if t in lowered]
    violations += [t for t in PROHIBITED_MEDICAL_CLAIMS if t in lowered]
    return SafetyVerdict(safe=not violations, violations=violations)


# ---------------------------------------------------------------------
# Sanitisation
# ---------------------------------------------------------------------
_TAG_RE = re.compile(r"<[^>]*>")
_JS_SCHEME_RE = re.compile(r"javascript:", re.IGNORECASE)
_WS_RE = re.compile(r"\s+")


def sanitize(text):
    """
    Strip HTML tags and ``javascript:`` schemes, collapse whitespace.

    Stripping repeats until nothing changes, so nested payloads such as
    ``javajavascript:script:`` cannot reassemble and the result is stable
    under a second pass. Non-strings pass through untouched.
    """
    if not text or not isinstance(text, str):
        return text

    previous = None
    cleaned = text
    while cleaned != previous:
        previous = cleaned
        cleaned = _TAG_RE.sub("", cleaned)
        cleaned = _JS_SCHEME_RE.sub("", cleaned)
    return _WS_RE.sub(" ", cleaned).strip()


# ---------------------------------------------------------------------
# Emergency escalation
# ---------------------------------------------------------------------
EMERGENCY_KEYWORDS = (
    "chest pain",
    "difficulty breathing",
    "unconscious",
    "severe bleeding",
    "stroke",
    "heart attack",
    "seizure",
    "suicide",
    "self-harm",
    "poisoning",
    "allergic reaction",
    "anaphylaxis",
)

EMERGENCY_MESSAGE = (
    "EMERGENCY INDICATORS DETECTED. This case should be flagged as URGENT and reviewed immediately."
)
IMMEDIATE_ESCALATION = "IMMEDIATE_ESCALATION"


@dataclass(frozen=True)
class EmergencyCheck:
    is_emergency: bool
    triggers: list = field(default_factory=list)
    recommended_action: str | None = None
    message: str | None = None


def check_emergency(text) -> EmergencyCheck:
    if not text or not isinstance(text, str):
        return EmergencyCheck(is_emergency=False)

    lowered = text.lower()
    triggers = [k for k in EMERGENCY_KEYWORDS if k in lowered]
    if not triggers:
        return EmergencyCheck(is_emergency=False)

    return EmergencyCheck(
        is_emergency=True,
        triggers=triggers,
        recommended_action=IMMEDIATE_ESCALATION,
        message=EMERGENCY_MESSAGE,
    )


@dataclass(frozen=True)
class PrioritySuggestion:
    suggested_priority: str
    reason: str
    is_escalation: bool


def suggest_priority(chief_complaint, current_priority=CasePriority.ROUTINE) -> PrioritySuggestion:
    current = current_priority or CasePriority.ROUTINE
    emergency = check_emergency(chief_complaint)
    if emergency.is_emergency:
        return PrioritySuggestion(
            suggested_priority=CasePriority.URGENT,
            reason=f"Emergency keywords detected: {', '.join(emergency.triggers)}",
            is_escalation=current != CasePriority.URGENT,
        )
    return PrioritySuggestion(
        suggested_priority=current,
        reason="No emergency indicators detected",
        is_escalation=False,
    )


# ---------------------------------------------------------------------
# Disclaimers / AI output
# ---------------------------------------------------------------------
STANDARD_DISCLAIMER = (
    "GUIDANCE, NOT DIAGNOSIS. This information is generated to assist healthcare "
    "providers and does not constitute a medical diagnosis or treatment plan. All "
    "suggestions require validation by a qualified medical professional. Final "
    "clinical judgment rests with the treating physician."
)
MIN_DISCLAIMER_LENGTH = 50

_DIAGNOSTIC_PHRASES = (
    "you have",
    "diagnosed with",
    "diagnosis is",
    "confirmed to have",
    "you are suffering from",
)
_DIAGNOSTIC_RE = re.compile("|".join(re.escape(p) for p in _DIAGNOSTIC_PHRASES), re.IGNORECASE)
NEUTRAL_PHRASE = "may be experiencing symptoms of"


def enforce_disclaimer(recommendation: dict | None) -> dict | None:
    """Return a copy carrying the standard disclaimer, whatever it held before."""
    if recommendation is None:
        return None
    out = dict(recommendation)
    out["disclaimer"] = STANDARD_DISCLAIMER
    return out


def has_valid_disclaimer(payload: dict | None) -> bool:
    disclaimer = (payload or {}).get("disclaimer") or ""
    return len(disclaimer.strip()) >= MIN_DISCLAIMER_LENGTH


def scrub_diagnostic_language(text):
    """Rewrite definitive diagnosis phrasing in generated text."""
    if not text or not isinstance(text, str):
        return text
    return _DIAGNOSTIC_RE.sub(NEUTRAL_PHRASE, text)
