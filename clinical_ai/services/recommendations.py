"""
Deterministic recommendation drafting.

Advisory content comes from fixed templates keyed by complaint category and
prakriti, so the same case always yields the same draft. The standard
disclaimer is stamped on every draft and list sections are capped at ten
entries.
"""
from django.utils import timezone

from cases.enums import CasePriority
from cases.safety import enforce_disclaimer
from patients.enums import Prakriti

MODEL_VERSION = "stub-v0.1"
MAX_LIST_ITEMS = 10
DEFAULT = "default"

# keyword prefixes checked in order; first hit wins
CATEGORY_KEYWORDS = (
    ("gastric", ("stomach", "digest", "acid", "gastric")),
    ("respiratory", ("cough", "cold", "breath", "respiratory")),
    ("pain", ("pain", "ache")),
    ("fatigue", ("fatigue", "tired", "weakness")),
    ("cardiac", ("chest", "heart")),
)

CONFIDENCE_BY_CATEGORY = {
    "gastric": 78,
    "respiratory": 75,
    "pain": 72,
    "fatigue": 70,
    "cardiac": 65,
    DEFAULT: 74,
}

APPROACH = {
    "gastric": "Symptomatic management for gastrointestinal discomfort with dietary modifications recommended",
    "respiratory": "Supportive care for respiratory symptoms with monitoring advised",
    "pain": "Conservative pain management approach with activity modification recommended",
    "fatigue": "Comprehensive evaluation for fatigue with lifestyle assessment recommended",
    "cardiac": "Urgent evaluation recommended - cardiac symptoms require immediate attention",
    DEFAULT: "Standard protocol evaluation and symptomatic management recommended",
}

SUGGESTED_ACTIONS = {
    "gastric": [
        "Adequate hydration (2-3L water daily)",
        "Avoid spicy, fried, and acidic foods for 1 week",
        "Small, frequent meals instead of large meals",
        "Avoid lying down for 2 hours after eating",
        "Monitor symptoms for 48-72 hours",
    ],
    "respiratory": [
        "Adequate hydration (2-3L water daily)",
        "Steam inhalation 2-3 times daily",
        "Rest and avoid strenuous activity",
        "Avoid cold drinks and cold environments",
        "Monitor temperature twice daily",
    ],
    "pain": [
        "Rest the affected area appropriately",
        "Apply warm/cold compress as advised",
        "Gentle stretching if tolerable",
        "Maintain good posture",
        "Consider OTC pain relief if needed",
    ],
    "fatigue": [
        "Ensure 7-8 hours of quality sleep",
        "Regular meal times with balanced nutrition",
        "Light exercise (15-20 min walking)",
        "Reduce caffeine intake",
        "Consider blood work if symptoms persist",
    ],
    DEFAULT: [
        "Adequate hydration (2-3L water daily)",
        "Rest and stress reduction",
        "Monitor symptoms for 48-72 hours",
        "Maintain healthy diet",
        "Schedule follow-up if symptoms persist beyond 1 week",
    ],
}

CONSTITUTIONAL_NOTES = {
    Prakriti.VATA: "Vata imbalance indicated - focus on grounding, warming, and routine-based practices",
    Prakriti.PITTA: "Pitta aggravation suspected - cooling, calming, and moderation recommended",
    Prakriti.KAPHA: "Kapha accumulation indicated - stimulating, lightening, and activating approach suggested",
    DEFAULT: "Constitutional assessment pending - general balancing approach with seasonal awareness recommended",
}

DIETARY_GUIDANCE = {
    Prakriti.VATA: [
        "Prefer warm, cooked, and moist foods",
        "Include healthy fats (ghee, sesame oil)",
        "Avoid raw, cold, and dry foods",
        "Regular meal times are essential",
        "Warm milk with spices before bed",
    ],
    Prakriti.PITTA: [
        "Prefer cooling foods (cucumber, coconut, milk)",
        "Avoid spicy, sour, and fermented foods",
        "Include sweet, bitter, and astringent tastes",
        "Moderate salt intake",
        "Avoid skipping meals",
    ],
    Prakriti.KAPHA: [
        "Prefer light, warm, and dry foods",
        "Include pungent, bitter, and astringent tastes",
        "Avoid heavy, oily, and sweet foods",
        "Skip breakfast if not hungry",
        "Ginger tea before meals",
    ],
    DEFAULT: [
        "Prefer freshly cooked, warm meals",
        "Include seasonal vegetables in diet",
        "Reduce processed and packaged foods",
        "Adequate water intake between meals",
        "Light dinner at least 2 hours before sleep",
    ],
}

LIFESTYLE_GUIDANCE = {
    Prakriti.VATA: [
        "Maintain regular daily routine",
        "Warm oil self-massage (Abhyanga) before bath",
        "Avoid excessive travel and stimulation",
        "Early to bed (by 10 PM)",
        "Gentle, grounding yoga practices",
    ],
    Prakriti.PITTA: [
        "Avoid excessive heat and direct sun",
        "Cool shower or swimming recommended",
        "Moderate exercise, avoid overexertion",
        "Moonlight walks in evening",
        "Practice patience and cooling pranayama",
    ],
    Prakriti.KAPHA: [
        "Rise early (before 6 AM)",
        "Vigorous exercise recommended",
        "Dry brushing before shower",
        "Avoid daytime napping",
        "Engage in stimulating activities",
    ],
    DEFAULT: [
        "Maintain regular sleep schedule (10 PM - 6 AM ideal)",
        "Morning sunlight exposure for 15-20 minutes",
        "Gentle walking for 20-30 minutes daily",
        "Reduce screen time 1 hour before bed",
        "Practice 5 minutes of deep breathing daily",
    ],
}

HERB_SUGGESTIONS = {
    "gastric": [
        "Shatavari - digestive soothing",
        "Triphala - digestive regulation",
        "Mulethi (Licorice) - if no hypertension",
        "Jeera (Cumin) water - daily consumption",
    ],
    "respiratory": [
        "Tulsi (Holy Basil) - respiratory support",
        "Ginger-honey combination - throat soothing",
        "Mulethi (Licorice) - if no hypertension",
        "Pippali - respiratory clearing",
    ],
    DEFAULT: [
        "Tulsi (Holy Basil) - general immunity",
        "Ashwagandha - stress adaptation (consult if on medications)",
        "Triphala - digestive health",
        "Amla - vitamin C and rejuvenation",
    ],
}

YOGA_RECOMMENDATIONS = [
    "Pranayama: Anulom Vilom (alternate nostril breathing) - 5 minutes",
    "Gentle stretching upon waking",
    "Shavasana (corpse pose) for relaxation - 10 minutes before sleep",
]

RED_FLAGS = {
    CasePriority.URGENT: [
        "URGENT: Immediate medical evaluation strongly recommended",
        "Seek emergency care if symptoms worsen suddenly",
        "Do not delay - consult healthcare provider immediately",
        "If chest pain occurs, call emergency services",
    ],
    CasePriority.ELEVATED: [
        "Monitor closely - seek care if symptoms worsen",
        "Consult within 24 hours if no improvement",
        "Emergency visit if difficulty breathing develops",
        "Seek immediate care if high fever (>103F) occurs",
    ],
    DEFAULT: [
        "Seek care if symptoms worsen significantly",
        "Consult if symptoms persist beyond 1 week",
        "Emergency visit if difficulty breathing develops",
        "Seek immediate care if high fever (>103F) occurs",
    ],
}

CONTRAINDICATIONS = [
    "Consult physician before use if pregnant or nursing",
    "Discontinue if allergic reaction occurs",
    "Inform doctor of all current medications",
    "Not a substitute for professional medical advice",
]

CLINICAL_FLAGS = {
    "gastric": ["gi_evaluation_needed", "dietary_assessment_recommended"],
    "respiratory": ["respiratory_monitoring", "infection_screening_suggested"],
    "pain": ["pain_management_needed", "mobility_assessment"],
    "fatigue": ["metabolic_screening_suggested", "sleep_assessment_needed"],
    "cardiac": ["cardiac_evaluation_recommended", "urgent_attention_required"],
    DEFAULT: ["routine_evaluation", "standard_workup"],
}

ESTIMATED_COST_RANGE = {"min": 100, "max": 500, "currency": "INR"}


def complaint_category(chief_complaint) -> str:
    lowered = (chief_complaint or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in lowered for k in keywords):
            return category
    return DEFAULT


def clinical_flags_for(chief_complaint) -> list[str]:
    return list(CLINICAL_FLAGS[complaint_category(chief_complaint)])


def structured_summary_for(case, patient=None) -> str:
    age = getattr(patient, "age", None)
    gender = {"M": "male", "F": "female"}.get(getattr(patient, "gender", None), "patient")
    complaint = (case.chief_complaint or "unspecified complaint").lower()
    duration = case.symptom_duration or "unspecified duration"
    return (
        f"{age if age is not None else 'Unknown age'}-year-old {gender} presenting with {complaint} for {duration}. "
        "Vital signs within acceptable limits. No immediate red flags identified from initial assessment. "
        "Recommend standard evaluation per clinical protocol."
    )


def _capped(items) -> list:
    return list(items)[:MAX_LIST_ITEMS]


def draft_recommendation(case, prakriti=None, risk_flags=None) -> dict:
    """
    Build the recommendation payload for ``case``. ``risk_flags`` from the
    summary step are appended to the template red flags.
    """
    category = complaint_category(case.chief_complaint)
    constitution = prakriti if prakriti in Prakriti.values else DEFAULT
    priority = case.priority or CasePriority.ROUTINE

    urgent = priority == CasePriority.URGENT
    cardiac = category == "cardiac"
    if urgent:
        referral_reason = "Elevated symptoms require specialist evaluation"
    elif cardiac:
        referral_reason = "Cardiac symptoms require specialist evaluation"
    else:
        referral_reason = None

    red_flags = list(RED_FLAGS.get(priority, RED_FLAGS[DEFAULT]))
    for flag in risk_flags or []:
        if flag not in red_flags:
            red_flags.append(flag)

    draft = {
        "caseFileId": case.id,
        "generatedAt": timezone.now(),
        "aiModelVersion": MODEL_VERSION,
        "confidenceScore": CONFIDENCE_BY_CATEGORY[category],
        "allopathy": {
            "approach": APPROACH[category],
            "suggestedActions": _capped(SUGGESTED_ACTIONS.get(category, SUGGESTED_ACTIONS[DEFAULT])),
            "genericFirst": True,
            "referralNeeded": urgent or cardiac,
            "referralReason": referral_reason,
        },
        "ayurveda": {
            "constitutionalNote": CONSTITUTIONAL_NOTES[constitution],
            "dietaryGuidance": _capped(DIETARY_GUIDANCE[constitution]),
            "lifestyleGuidance": _capped(LIFESTYLE_GUIDANCE[constitution]),
            "herbSuggestions": _capped(HERB_SUGGESTIONS.get(category, HERB_SUGGESTIONS[DEFAULT])),
            "yogaRecommendations": _capped(YOGA_RECOMMENDATIONS),
        },
        "contraindications": _capped(CONTRAINDICATIONS),
        "redFlags": _capped(red_flags),
        "estimatedCostRange": dict(ESTIMATED_COST_RANGE),
    }
    return enforce_disclaimer(draft)
