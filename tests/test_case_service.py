"""CaseService scenarios against in-memory fakes (no database)."""
import pytest

from cases.enums import CasePriority, CaseSource, CaseStatus
from cases.exceptions import ConcurrentModification


class TestSubmitCase:

    def test_creates_draft(self, service, patient):
        result = service.submit_case({
            "patientId": patient.id,
            "chiefComplaint": "Mild <i>acidity</i> after meals",
            "symptomDuration": "3 days",
            "vitalSigns": {"temperature": 98.6, "bloodPressure": "120/80"},
        })
        assert result.success
        data = result.data
        assert data["status"] == CaseStatus.DRAFT
        assert data["priority"] == CasePriority.ROUTINE
        assert data["source"] == CaseSource.DIRECT
        assert data["chiefComplaint"] == "Mild acidity after meals"
        assert data["version"] == 1
        assert data["_meta"]["allowedTransitions"] == ["PENDING_REVIEW"]
        assert result.warnings == []

    def test_emergency_forces_urgent(self, service, patient):
        result = service.submit_case({
            "patientId": patient.id,
            "chiefComplaint": "Severe chest pain radiating to left arm",
            "priority": "ROUTINE",
        })
        assert result.success
        assert result.data["priority"] == CasePriority.URGENT
        types = [w["type"] for w in result.warnings]
        assert types == ["EMERGENCY_ESCALATION", "PRIORITY_SUGGESTION"]
        assert result.warnings[0]["triggers"] == ["chest pain"]
        assert result.warnings[1]["suggestedPriority"] == "URGENT"

    def test_emergency_already_urgent_has_single_warning(self, service, patient):
        result = service.submit_case({
            "patientId": patient.id,
            "chiefComplaint": "Possible seizure episode this morning",
            "priority": "URGENT",
        })
        assert [w["type"] for w in result.warnings] == ["EMERGENCY_ESCALATION"]

    def test_validation_error(self, service, patient):
        result = service.submit_case({"patientId": patient.id, "chiefComplaint": "abc"})
        assert not result.success
        assert result.error == "VALIDATION_ERROR"
        assert result.http_status == 400
        assert any(d["path"] == ["chiefComplaint"] for d in result.details)

    def test_markup_only_complaint_too_short(self, service, patient):
        result = service.submit_case({"patientId": patient.id, "chiefComplaint": "<b></b><i></i>x"})
        assert result.error == "VALIDATION_ERROR"
        assert result.details == [
            {"path": ["chiefComplaint"], "message": "Chief complaint must be at least 5 characters"}
        ]

    def test_unknown_patient(self, service):
        result = service.submit_case({"patientId": "pat_missing", "chiefComplaint": "Headache for days"})
        assert result.error == "NOT_FOUND"
        assert result.http_status == 404

    def test_prohibited_language(self, service, patient):
        result = service.submit_case({
            "patientId": patient.id,
            "chiefComplaint": "Patient has been diagnosed with migraine",
        })
        assert result.error == "SAFETY_VIOLATION"
        assert result.http_status == 422
        assert "diagnosed with" in result.details

    def test_too_many_attachments(self, service, patient):
        attachments = [{"type": "IMAGE", "description": f"photo {i}"} for i in range(11)]
        result = service.submit_case({
            "patientId": patient.id,
            "chiefComplaint": "Skin rash on forearm",
            "attachments": attachments,
        })
        assert result.error == "VALIDATION_ERROR"


class TestReadCases:

    def test_get_case_includes_patient(self, service, new_case, patient):
        created = new_case()
        result = service.get_case(created["id"])
        assert result.success
        assert result.data["patient"]["fullName"] == patient.full_name

    def test_get_missing(self, service):
        assert service.get_case("case_nope").error == "NOT_FOUND"

    def test_list_orders_queue(self, service, new_case):
        r1 = new_case("Routine joint stiffness")
        r2 = new_case("Routine mild cold")
        e1 = new_case("Elevated fever since yesterday", priority="ELEVATED")
        u1 = new_case("Sudden stroke symptoms noticed")
        u2 = new_case("Heart attack history, chest pain now")

        ids = [c["id"] for c in service.list_cases().data["cases"]]
        assert ids == [u2["id"], u1["id"], e1["id"], r1["id"], r2["id"]]

    def test_list_filters_and_paging(self, service, new_case):
        for i in range(5):
            new_case(f"Routine complaint number {i}")
        new_case("Elevated back discomfort", priority="ELEVATED")

        only_elevated = service.list_cases({"priority": "ELEVATED"}).data
        assert only_elevated["pagination"]["total"] == 1

        bogus = service.list_cases({"status": "NOPE"}).data
        assert bogus["pagination"]["total"] == 6

        paged = service.list_cases({"page": "2", "limit": "4"}).data
        assert len(paged["cases"]) == 2
        assert paged["pagination"] == {"page": 2, "limit": 4, "total": 6, "totalPages": 2}

    def test_patient_cases_newest_first(self, service, new_case, patient):
        first = new_case("First visit complaint")
        second = new_case("Second visit complaint")
        data = service.get_patient_cases(patient.id).data
        assert [c["id"] for c in data] == [second["id"], first["id"]]
        assert service.get_patient_cases("pat_missing").error == "NOT_FOUND"

    def test_queue_stats(self, service, new_case):
        new_case("Routine joint stiffness")
        c = new_case("Unconscious briefly after fall")
        service.submit_for_review(c["id"])
        stats = service.get_queue_stats().data
        assert stats["total"] == 2
        assert stats["urgentCount"] == 1
        assert stats["pendingReviewCount"] == 1


class TestUpdateCase:

    def test_draft_edit(self, service, new_case):
        c = new_case()
        result = service.update_case(c["id"], {"symptomDuration": "2 weeks", "priority": "ELEVATED"})
        assert result.success
        assert result.data["symptomDuration"] == "2 weeks"
        assert result.data["priority"] == "ELEVATED"
        assert result.data["version"] == 2

    def test_sanitized_complaint_too_short(self, service, new_case):
        c = new_case()
        result = service.update_case(c["id"], {"chiefComplaint": "<p>   </p><span>ok</span>"})
        assert result.error == "VALIDATION_ERROR"
        assert result.details[0]["path"] == ["chiefComplaint"]
        assert service.get_case(c["id"]).data["version"] == 1

    def test_doctor_notes_blocked_in_draft(self, service, new_case):
        c = new_case()
        result = service.update_case(c["id"], {"doctorNotes": "Looks fine"})
        assert result.error == "INVALID_STATE"
        assert result.http_status == 409
        assert result.message == "Some fields cannot be edited in current status"
        assert result.details == [{"field": "doctorNotes", "reason": "Doctor fields not available in draft"}]

    def test_unknown_and_immutable_keys(self, service, new_case):
        c = new_case()
        result = service.update_case(c["id"], {"id": "case_other", "mood": "happy"})
        assert result.error == "INVALID_STATE"
        assert {d["field"] for d in result.details} == {"id", "mood"}

    def test_locked_after_submission(self, service, new_case):
        c = new_case()
        service.submit_for_review(c["id"])
        result = service.update_case(c["id"], {"chiefComplaint": "Changed my mind entirely"})
        assert result.error == "INVALID_STATE"
        ok = service.update_case(c["id"], {"doctorNotes": "Reviewed vitals, stable"})
        assert ok.success

    def test_unsafe_doctor_notes(self, service, new_case):
        c = new_case()
        service.submit_for_review(c["id"])
        result = service.update_case(c["id"], {"doctorNotes": "Prescribe antacids"})
        assert result.error == "SAFETY_VIOLATION"
        assert result.details == ["prescribe"]

    def test_stale_version_conflicts(self, service, case_repo, new_case):
        c = new_case()
        stale = case_repo.find_by_id(c["id"])
        service.update_case(c["id"], {"symptomDuration": "1 week"})
        stale.symptom_duration = "stale"
        with pytest.raises(ConcurrentModification):
            case_repo.update(stale, ["symptom_duration"])

    def test_missing_case(self, service):
        assert service.update_case("case_nope", {"priority": "URGENT"}).error == "NOT_FOUND"


class TestTransitions:

    def test_full_lifecycle(self, service, case_repo, new_case):
        c = new_case()
        assert service.submit_for_review(c["id"]).data["status"] == "PENDING_REVIEW"
        reviewed = service.mark_as_reviewed(c["id"], "Dr. Meera Rao")
        assert reviewed.data["reviewedBy"] == "Dr. Meera Rao"
        closed = service.close_case(c["id"], "Advised rest and hydration; follow up in one week")
        assert closed.data["status"] == "CLOSED"
        assert closed.data["_meta"]["allowedTransitions"] == []
        assert [t[2] for t in case_repo.transitions] == ["PENDING_REVIEW", "REVIEWED", "CLOSED"]

    def test_close_from_draft(self, service, new_case):
        c = new_case()
        result = service.close_case(c["id"], "Advised rest")
        assert result.error == "INVALID_STATE"
        assert result.allowed_transitions == ["PENDING_REVIEW"]
        assert result.to_dict()["allowedTransitions"] == ["PENDING_REVIEW"]

    def test_close_with_diagnosis(self, service, new_case):
        c = new_case()
        service.submit_for_review(c["id"])
        service.mark_as_reviewed(c["id"], "Dr. Rao")
        result = service.close_case(
            c["id"], "Patient diagnosed with hypertension. Prescribe amlodipine 5mg twice daily."
        )
        assert result.error == "SAFETY_VIOLATION"
        assert {"diagnosed with", "prescribe", "mg twice daily"} <= set(result.details)
        assert service.get_case(c["id"]).data["status"] == "REVIEWED"

    def test_closed_is_final(self, service, new_case):
        c = new_case()
        service.submit_for_review(c["id"])
        service.mark_as_reviewed(c["id"], "Dr. Rao")
        service.close_case(c["id"], "Follow up as needed")
        assert service.return_to_draft(c["id"]).error == "INVALID_STATE"
        assert service.update_case(c["id"], {"priority": "URGENT"}).error == "INVALID_STATE"

    def test_return_to_draft_reopens_editing(self, service, new_case):
        c = new_case()
        service.submit_for_review(c["id"])
        assert service.return_to_draft(c["id"]).data["status"] == "DRAFT"
        assert service.update_case(c["id"], {"chiefComplaint": "Updated complaint text"}).success

    def test_missing_reviewer(self, service, new_case):
        c = new_case()
        service.submit_for_review(c["id"])
        assert service.mark_as_reviewed(c["id"], "").error == "VALIDATION_ERROR"
