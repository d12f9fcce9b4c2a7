from cases.models import Case
from cases.safety import STANDARD_DISCLAIMER, validate_content_safety
from clinical_ai.services.pipeline import apply_safety_validation
from clinical_ai.services.recommendations import (
    MAX_LIST_ITEMS,
    clinical_flags_for,
    complaint_category,
    draft_recommendation,
    structured_summary_for,
)
from .conftest import make_patient


def _case(chief_complaint, priority="ROUTINE"):
    return Case(patient_id="pat_test0001", chief_complaint=chief_complaint, priority=priority)


class TestTemplates:

    def test_categories(self):
        assert complaint_category("Stomach ache after meals") == "gastric"
        assert complaint_category("Dry cough") == "respiratory"
        assert complaint_category("Feeling tired all day") == "fatigue"
        assert complaint_category("Something else") == "default"

    def test_flags(self):
        assert clinical_flags_for("Chest tightness") == ["cardiac_evaluation_recommended", "urgent_attention_required"]

    def test_structured_summary(self):
        text = structured_summary_for(_case("Dry cough"), make_patient(age=42, gender="F"))
        assert text.startswith("42-year-old female presenting with dry cough")


class TestDraft:

    def test_draft_shape(self):
        draft = draft_recommendation(_case("Acidity and stomach burning"), prakriti="PITTA")
        assert draft["disclaimer"] == STANDARD_DISCLAIMER
        assert draft["confidenceScore"] == 78
        assert draft["ayurveda"]["constitutionalNote"].startswith("Pitta")
        assert draft["allopathy"]["referralNeeded"] is False
        assert draft["estimatedCostRange"] == {"min": 100, "max": 500, "currency": "INR"}

    def test_urgent_needs_referral(self):
        draft = draft_recommendation(_case("Sudden weakness", priority="URGENT"))
        assert draft["allopathy"]["referralNeeded"] is True
        assert draft["redFlags"][0].startswith("URGENT")

    def test_risk_flags_merged_and_capped(self):
        flags = [f"extra flag {i}" for i in range(20)]
        draft = draft_recommendation(_case("Mild rash"), risk_flags=flags)
        assert len(draft["redFlags"]) == MAX_LIST_ITEMS

    def test_template_content_is_safe(self):
        for complaint in ("stomach", "cough", "pain", "tired", "chest", "other"):
            draft = draft_recommendation(_case(f"{complaint} issue", priority="ELEVATED"))
            for section in (draft["allopathy"], draft["ayurveda"]):
                for value in section.values():
                    items = value if isinstance(value, list) else [value]
                    for item in items:
                        if isinstance(item, str):
                            assert validate_content_safety(item).safe, item


class TestSafetyValidation:

    def test_drops_unsafe_items(self):
        draft = draft_recommendation(_case("Dry cough"), risk_flags=["This will cure you", "Watch for wheezing"])
        draft["ayurveda"]["herbSuggestions"].append("Guaranteed to work, no side effects")
        draft["allopathy"]["approach"] = "Patient has bronchitis"
        draft["disclaimer"] = ""

        out = apply_safety_validation(draft)
        assert "This will cure you" not in out["redFlags"]
        assert "Watch for wheezing" in out["redFlags"]
        assert all(validate_content_safety(h).safe for h in out["ayurveda"]["herbSuggestions"])
        assert validate_content_safety(out["allopathy"]["approach"]).safe
        assert out["disclaimer"] == STANDARD_DISCLAIMER
