import pytest

from cases.enums import CasePriority, CaseStatus
from cases.safety import (
    MIN_DISCLAIMER_LENGTH,
    PROHIBITED_DIAGNOSIS_TERMS,
    PROHIBITED_MEDICAL_CLAIMS,
    STANDARD_DISCLAIMER,
    check_emergency,
    enforce_disclaimer,
    get_allowed_transitions,
    has_valid_disclaimer,
    is_valid_transition,
    sanitize,
    scrub_diagnostic_language,
    suggest_priority,
    validate_content_safety,
)


class TestStatusGraph:

    def test_allowed_transitions(self):
        assert get_allowed_transitions(CaseStatus.DRAFT) == ["PENDING_REVIEW"]
        assert get_allowed_transitions(CaseStatus.PENDING_REVIEW) == ["REVIEWED", "DRAFT"]
        assert get_allowed_transitions(CaseStatus.REVIEWED) == ["CLOSED", "PENDING_REVIEW"]

    def test_closed_is_absorbing(self):
        assert get_allowed_transitions(CaseStatus.CLOSED) == []
        for target in CaseStatus:
            assert not is_valid_transition(CaseStatus.CLOSED, target)

    def test_unknown_status_has_no_edges(self):
        assert get_allowed_transitions("ARCHIVED") == []
        assert not is_valid_transition("ARCHIVED", CaseStatus.DRAFT)

    def test_self_transition_rejected(self):
        for s in CaseStatus:
            assert not is_valid_transition(s, s)


class TestContentSafety:

    def test_clean_text(self):
        verdict = validate_content_safety("Patient reports mild headache for two days")
        assert verdict.safe
        assert verdict.violations == []

    def test_empty_and_non_string_are_safe(self):
        assert validate_content_safety("").safe
        assert validate_content_safety(None).safe
        assert validate_content_safety(42).safe

    def test_reports_every_matched_term(self):
        verdict = validate_content_safety(
            "Patient diagnosed with hypertension. Prescribe amlodipine 5mg twice daily."
        )
        assert not verdict.safe
        assert "diagnosed with" in verdict.violations
        assert "prescribe" in verdict.violations
        assert "mg twice daily" in verdict.violations

    def test_case_insensitive(self):
        assert validate_content_safety("This WILL CURE everything").violations == ["will cure"]

    @pytest.mark.parametrize("term", PROHIBITED_DIAGNOSIS_TERMS + PROHIBITED_MEDICAL_CLAIMS)
    def test_each_term_is_caught(self, term):
        assert term in validate_content_safety(f"xx {term} yy").violations

    def test_disclaimer_itself_is_safe(self):
        assert validate_content_safety(STANDARD_DISCLAIMER).safe


class TestSanitize:

    def test_strips_tags_and_scheme(self):
        assert sanitize("<b>Head</b>ache <script>x</script>") == "Headache x"
        assert sanitize("click javascript:alert(1)") == "click alert(1)"

    def test_collapses_whitespace(self):
        assert sanitize("  a \n\t b  ") == "a b"

    def test_nested_payload_does_not_reassemble(self):
        out = sanitize("javajavascript:script:alert(1)")
        assert "javascript:" not in out.lower()

    @pytest.mark.parametrize("text", [
        "plain text",
        "<<b>i>nested</i>",
        "java<x>script:alert(1)",
        "  spaced   <p>out</p>  ",
    ])
    def test_idempotent(self, text):
        once = sanitize(text)
        assert sanitize(once) == once

    def test_passthrough_for_empty_and_non_strings(self):
        assert sanitize("") == ""
        assert sanitize(None) is None
        assert sanitize(7) == 7


class TestEmergency:

    def test_chest_pain(self):
        check = check_emergency("Severe chest pain and difficulty breathing")
        assert check.is_emergency
        assert check.triggers == ["chest pain", "difficulty breathing"]
        assert check.recommended_action == "IMMEDIATE_ESCALATION"

    def test_no_emergency(self):
        check = check_emergency("mild cold")
        assert not check.is_emergency
        assert check.triggers == []

    def test_priority_suggestion(self):
        s = suggest_priority("sudden chest pain", CasePriority.ROUTINE)
        assert s.suggested_priority == CasePriority.URGENT
        assert s.is_escalation

        already = suggest_priority("sudden chest pain", CasePriority.URGENT)
        assert not already.is_escalation

        calm = suggest_priority("itchy skin", CasePriority.ELEVATED)
        assert calm.suggested_priority == CasePriority.ELEVATED
        assert not calm.is_escalation


class TestDisclaimer:

    def test_enforce_overwrites(self):
        out = enforce_disclaimer({"disclaimer": "short", "x": 1})
        assert out["disclaimer"] == STANDARD_DISCLAIMER
        assert out["x"] == 1
        assert len(out["disclaimer"]) >= MIN_DISCLAIMER_LENGTH

    def test_enforce_none(self):
        assert enforce_disclaimer(None) is None

    def test_has_valid_disclaimer(self):
        assert has_valid_disclaimer({"disclaimer": STANDARD_DISCLAIMER})
        assert not has_valid_disclaimer({"disclaimer": "too short"})
        assert not has_valid_disclaimer({})

    def test_scrub_diagnostic_language(self):
        out = scrub_diagnostic_language("You have gastritis; earlier diagnosed with GERD.")
        assert "you have" not in out.lower()
        assert "diagnosed with" not in out.lower()
        assert out.count("may be experiencing symptoms of") == 2
