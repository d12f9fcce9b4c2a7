"""
Clinical summary generation.

Calls an OpenAI chat model in JSON mode to summarise reported symptoms. When
no API key is configured, or the call fails for any reason, a deterministic
stub summary is returned instead, so callers never see an exception from here.
"""
import json
import logging
import time

from django.conf import settings
from openai import APIConnectionError, APITimeoutError, InternalServerError, OpenAI, RateLimitError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random_exponential

from cases.safety import STANDARD_DISCLAIMER, scrub_diagnostic_language
from clinical_ai.enums import UrgencyLevel

logger = logging.getLogger(__name__)

STUB_MODEL_VERSION = "stub-v0.1"
STUB_CONFIDENCE = 50
AI_CONFIDENCE = 75
DEFAULT_FOLLOW_UP = "Consult with a healthcare provider for personalized advice."
URGENT_RISK_FLAG = "Elevated symptoms - requires attention"

SYSTEM_PROMPT = """You are a clinical decision support assistant. Your role is to summarize patient symptoms and identify potential risk flags.

CRITICAL RULES:
1. NEVER diagnose any condition
2. NEVER prescribe treatments or medications
3. NEVER claim certainty about any medical condition
4. Focus ONLY on summarizing symptoms and identifying general risk indicators
5. Use neutral, clinical language
6. Always err on the side of caution"""

USER_PROMPT = """Analyze the following patient case and provide a structured summary.

PATIENT CASE:
- Chief Complaint: {chief_complaint}
- Symptom Duration: {symptom_duration}
- Current Priority: {priority}
{source_info}
Provide your response as JSON with this exact structure:
{{
  "summary": "Brief clinical summary of the reported symptoms (2-3 sentences)",
  "riskFlags": ["List of potential risk indicators to watch for"],
  "urgencyLevel": "ROUTINE or ELEVATED or URGENT",
  "keySymptoms": ["Main symptoms identified"],
  "suggestedFollowUp": "General, non-prescriptive suggestion for next steps"
}}

REMEMBER:
- Do NOT diagnose
- Do NOT prescribe
- Summarize symptoms only
- Identify general risk indicators
"""

RETRYABLE_ERRORS = (APIConnectionError, APITimeoutError, RateLimitError, InternalServerError)


def case_snapshot(case) -> dict:
    """Plain-data view of the fields the summariser reads."""
    return {
        "id": case.id,
        "chiefComplaint": case.chief_complaint,
        "symptomDuration": case.symptom_duration,
        "priority": case.priority,
        "rawNotes": case.raw_notes,
    }


def build_prompt(snapshot: dict) -> str:
    source_info = ""
    try:
        notes = json.loads(snapshot.get("rawNotes") or "{}")
    except (TypeError, ValueError):
        notes = {}
    if isinstance(notes, dict) and notes.get("source") == "CHAT_BRIDGE":
        source_info = f"- Original Message: {notes.get('originalMessage', '')}\n"

    return USER_PROMPT.format(
        chief_complaint=snapshot.get("chiefComplaint") or "Not provided",
        symptom_duration=snapshot.get("symptomDuration") or "Not specified",
        priority=snapshot.get("priority") or UrgencyLevel.ROUTINE,
        source_info=source_info,
    )


def normalize_urgency(value) -> str:
    return value if value in UrgencyLevel.values else UrgencyLevel.ROUTINE.value


def _str_list(value, limit: int = 10) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v][:limit]


def stub_summary(snapshot: dict, error: str | None = None) -> dict:
    complaint = snapshot.get("chiefComplaint") or "symptoms not specified"
    priority = snapshot.get("priority") or UrgencyLevel.ROUTINE
    first_word = (snapshot.get("chiefComplaint") or "").split(" ")[0] or "unspecified"
    out = {
        "summary": f"Patient reports: {complaint}. Duration: {snapshot.get('symptomDuration') or 'unspecified'}.",
        "riskFlags": [URGENT_RISK_FLAG] if priority == UrgencyLevel.URGENT else [],
        "urgencyLevel": normalize_urgency(priority),
        "keySymptoms": [first_word],
        "suggestedFollowUp": DEFAULT_FOLLOW_UP,
        "confidenceScore": STUB_CONFIDENCE,
        "isAIGenerated": False,
        "modelVersion": STUB_MODEL_VERSION,
        "processingTimeMs": 0,
        "disclaimer": STANDARD_DISCLAIMER,
    }
    if error and settings.DEBUG:
        out["debugError"] = error
    return out


@retry(
    wait=wait_random_exponential(multiplier=0.5, max=4),
    stop=stop_after_attempt(3),
    retry=retry_if_exception_type(RETRYABLE_ERRORS),
    reraise=True,
)
def _request_completion(client, model: str, prompt: str):
    return client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        response_format={"type": "json_object"},
        temperature=0.3,
        max_tokens=500,
    )


class AISummaryGenerator:

    def __init__(self, client=None, model: str | None = None):
        self.model = model or getattr(settings, "OPENAI_MODEL", "gpt-4o-mini")
        self._client = client
        if self._client is None and getattr(settings, "OPENAI_API_KEY", ""):
            self._client = OpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=float(getattr(settings, "OPENAI_TIMEOUT_SEC", 15)),
                max_retries=0,
            )

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def generate(self, snapshot: dict) -> dict:
        if not self.is_available:
            logger.info(f"OpenAI not configured, stub summary for {snapshot.get('id')}")
            return stub_summary(snapshot)

        started = time.monotonic()
        try:
            attempts = 1 + max(0, int(getattr(settings, "OPENAI_MAX_RETRIES", 2)))
            request = _request_completion.retry_with(stop=stop_after_attempt(attempts))
            response = request(self._client, self.model, build_prompt(snapshot))
            payload = json.loads(response.choices[0].message.content or "{}")
            if not isinstance(payload, dict):
                raise ValueError("Model returned a non-object JSON payload")
        except Exception as e:
            # any upstream failure degrades to the stub; the case must not stall
            logger.warning(f"OpenAI summary failed for {snapshot.get('id')}: {e}; using stub")
            return stub_summary(snapshot, error=str(e))

        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info(f"OpenAI summary for {snapshot.get('id')} in {elapsed_ms}ms")
        return {
            "summary": scrub_diagnostic_language(payload.get("summary") or "Summary generation completed."),
            "riskFlags": _str_list(payload.get("riskFlags")),
            "urgencyLevel": normalize_urgency(payload.get("urgencyLevel")),
            "keySymptoms": _str_list(payload.get("keySymptoms")),
            "suggestedFollowUp": scrub_diagnostic_language(payload.get("suggestedFollowUp") or DEFAULT_FOLLOW_UP),
            "confidenceScore": AI_CONFIDENCE,
            "isAIGenerated": True,
            "modelVersion": self.model,
            "processingTimeMs": elapsed_ms,
            "disclaimer": STANDARD_DISCLAIMER,
        }
