import pytest

from cases.editability import blocked_fields, editability_info, is_editable
from cases.enums import CaseStatus


class TestIsEditable:

    @pytest.mark.parametrize("status", list(CaseStatus))
    @pytest.mark.parametrize("field", ["id", "patientId", "createdAt"])
    def test_immutable_everywhere(self, field, status):
        verdict = is_editable(field, status)
        assert not verdict.editable
        assert verdict.reason == "Field is immutable after creation"

    @pytest.mark.parametrize("field", ["updatedAt", "structuredSummary", "clinicalFlags", "recommendationId"])
    def test_system_managed(self, field):
        verdict = is_editable(field, CaseStatus.DRAFT)
        assert not verdict.editable
        assert verdict.reason == "Field is managed by the system"

    def test_pre_review_fields(self):
        assert is_editable("chiefComplaint", CaseStatus.DRAFT).editable
        locked = is_editable("chiefComplaint", CaseStatus.PENDING_REVIEW)
        assert not locked.editable
        assert locked.reason == "Field is locked after submission for review"

    def test_doctor_fields(self):
        draft = is_editable("doctorNotes", CaseStatus.DRAFT)
        assert not draft.editable
        assert draft.reason == "Doctor fields not available in draft"
        assert is_editable("doctorNotes", CaseStatus.PENDING_REVIEW).editable
        assert is_editable("doctorDecision", CaseStatus.REVIEWED).editable
        assert is_editable("doctorNotes", CaseStatus.CLOSED).reason == "Case is closed"

    def test_priority(self):
        for s in (CaseStatus.DRAFT, CaseStatus.PENDING_REVIEW, CaseStatus.REVIEWED):
            assert is_editable("priority", s).editable
        assert not is_editable("priority", CaseStatus.CLOSED).editable

    def test_unknown_field(self):
        verdict = is_editable("favouriteColour", CaseStatus.DRAFT)
        assert not verdict.editable
        assert verdict.reason == "Unknown field"

    @pytest.mark.parametrize("field", [
        "id", "chiefComplaint", "vitalSigns", "priority", "doctorNotes", "doctorDecision", "reviewedBy",
    ])
    def test_nothing_editable_when_closed(self, field):
        assert not is_editable(field, CaseStatus.CLOSED).editable


class TestHelpers:

    def test_blocked_fields_lists_reasons(self):
        blocked = blocked_fields(["priority", "doctorNotes", "id"], CaseStatus.DRAFT)
        assert blocked == [
            {"field": "doctorNotes", "reason": "Doctor fields not available in draft"},
            {"field": "id", "reason": "Field is immutable after creation"},
        ]

    def test_editability_info_draft(self):
        editable, read_only = editability_info(CaseStatus.DRAFT)
        assert "chiefComplaint" in editable
        assert "priority" in editable
        assert "doctorNotes" in read_only

    def test_editability_info_closed(self):
        editable, read_only = editability_info(CaseStatus.CLOSED)
        assert editable == []
        assert "priority" in read_only
