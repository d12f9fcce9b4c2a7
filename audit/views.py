from django.db.models import Q
from django.utils.dateparse import parse_datetime
from rest_framework import mixins, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.permissions import IsAdmin
from .models import AuditLog
from .serializers import AuditLogSerializer


class AuditLogViewSet(viewsets.GenericViewSet, mixins.ListModelMixin, mixins.RetrieveModelMixin):
    serializer_class = AuditLogSerializer
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated, IsAdmin]

    def get_queryset(self):
        q = AuditLog.objects.select_related("actor", "target_ct")
        p = self.request.query_params

        verb = p.get("verb")
        model = p.get("model")          # contenttype.model, e.g. "case"
        target_id = p.get("target_id")
        s = p.get("s")
        start = p.get("start")
        end = p.get("end")

        if verb: q = q.filter(verb=verb)
        if model: q = q.filter(target_ct__model=model.lower())
        if target_id: q = q.filter(target_id=str(target_id))
        if s: q = q.filter(Q(message__icontains=s) | Q(actor_email__icontains=s))
        if start: q = q.filter(created_at__gte=parse_datetime(start) or start)
        if end: q = q.filter(created_at__lte=parse_datetime(end) or end)

        return q.order_by("-created_at", "-id")
