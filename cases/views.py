from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.permissions import IsReviewer, IsStaff
from core.results import as_response
from .serializers import CloseActionSerializer, ReviewActionSerializer
from .services.case_service import get_case_service


class CaseViewSet(viewsets.GenericViewSet):
    """
    Case intake and review queue.

    Every response uses the service envelope:
    ``{"success": true, "data": ..., "warnings"?}`` or
    ``{"success": false, "error": ..., "message": ..., "details"?, "allowedTransitions"?}``.
    """
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated, IsStaff]
    lookup_value_regex = "[^/]+"

    def get_permissions(self):
        if self.action in ("review", "close"):
            return [IsAuthenticated(), IsReviewer()]
        return super().get_permissions()

    @property
    def service(self):
        return get_case_service()

    def create(self, request):
        return as_response(self.service.submit_case(request.data), success_status=status.HTTP_201_CREATED)

    def list(self, request):
        return as_response(self.service.list_cases(request.query_params))

    def retrieve(self, request, pk=None):
        return as_response(self.service.get_case(pk))

    def partial_update(self, request, pk=None):
        return as_response(self.service.update_case(pk, request.data))

    @action(detail=False, methods=["get"])
    def stats(self, request):
        return as_response(self.service.get_queue_stats())

    @action(detail=False, methods=["get"], url_path=r"patient/(?P<patient_id>[^/]+)")
    def patient(self, request, patient_id=None):
        return as_response(self.service.get_patient_cases(patient_id))

    @action(detail=True, methods=["post"])
    def submit(self, request, pk=None):
        return as_response(self.service.submit_for_review(pk))

    @action(detail=True, methods=["post"])
    def review(self, request, pk=None):
        s = ReviewActionSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        reviewer = s.validated_data.get("reviewedBy") or request.user.display_name
        return as_response(self.service.mark_as_reviewed(pk, reviewer))

    @action(detail=True, methods=["post"])
    def close(self, request, pk=None):
        s = CloseActionSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        return as_response(self.service.close_case(pk, s.validated_data.get("decision", "")))

    @action(detail=True, methods=["post"], url_path="return-to-draft")
    def return_to_draft(self, request, pk=None):
        return as_response(self.service.return_to_draft(pk))
