from django.db.models import Q
from rest_framework import viewsets, mixins
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.permissions import IsStaff

from .models import Patient
from .permissions import IsSelfOrStaff
from .serializers import PatientSerializer


class PatientViewSet(viewsets.GenericViewSet,
                     mixins.CreateModelMixin,
                     mixins.RetrieveModelMixin,
                     mixins.UpdateModelMixin,
                     mixins.ListModelMixin):
    queryset = Patient.objects.all().order_by("-created_at")
    serializer_class = PatientSerializer
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.action in ("list", "create"):
            return [IsAuthenticated(), IsStaff()]
        elif self.action in ("retrieve", "update", "partial_update"):
            return [IsAuthenticated(), IsSelfOrStaff()]
        return super().get_permissions()

    def list(self, request, *args, **kwargs):
        q = self.get_queryset()
        s = request.query_params.get("s")
        if s:
            q = q.filter(Q(full_name__icontains=s) | Q(phone__icontains=s) | Q(id__iexact=s))
        state = request.query_params.get("state")
        if state:
            q = q.filter(state__iexact=state)
        page = self.paginate_queryset(q)
        if page is not None:
            ser = PatientSerializer(page, many=True)
            return self.get_paginated_response(ser.data)
        return Response(PatientSerializer(q, many=True).data)
