"""
Keyword-based symptom category inference for informal chat messages.

The classifier is intentionally simple: substring matches against fixed
keyword buckets, so every routing decision can be traced to the words that
triggered it.
"""
from dataclasses import dataclass, field

GENERAL = "general"
CONFIDENCE_PER_MATCH = 25
MIN_CASE_CONFIDENCE = 25

# ordered: when two buckets tie on match count the earlier one wins
SYMPTOM_KEYWORDS = (
    ("gastric", ("stomach", "digestion", "gas", "acidity", "heartburn", "nausea", "vomiting")),
    ("respiratory", ("cough", "cold", "breathing", "congestion", "throat", "fever")),
    ("cardiac", ("heart", "chest", "bp", "pressure", "palpitations")),
    ("stress", ("stress", "anxiety", "sleep", "insomnia", "tension", "fatigue")),
    ("pain", ("pain", "ache", "headache", "backache", "joint")),
    ("skin", ("skin", "rash", "allergy", "itching", "acne")),
)
CATEGORIES = tuple(name for name, _ in SYMPTOM_KEYWORDS)


@dataclass(frozen=True)
class Intent:
    category: str = GENERAL
    symptoms: list[str] = field(default_factory=list)
    confidence: int = 0

    @property
    def is_actionable(self) -> bool:
        return self.confidence >= MIN_CASE_CONFIDENCE

    def as_dict(self) -> dict:
        return {"category": self.category, "symptoms": list(self.symptoms), "confidence": self.confidence}


def infer_intent(message) -> Intent:
    """
    >>> infer_intent("My stomach hurts and I have acidity").as_dict()
    {'category': 'gastric', 'symptoms': ['stomach', 'acidity'], 'confidence': 50}
    """
    if not message:
        return Intent()

    lowered = str(message).lower()
    category, best = GENERAL, 0
    matched = []
    for name, keywords in SYMPTOM_KEYWORDS:
        hits = [kw for kw in keywords if kw in lowered]
        if len(hits) > best:
            category, best = name, len(hits)
        matched.extend(hits)

    # confidence counts every hit, including a keyword listed in two buckets
    return Intent(
        category=category,
        symptoms=list(dict.fromkeys(matched)),
        confidence=min(100, len(matched) * CONFIDENCE_PER_MATCH),
    )
