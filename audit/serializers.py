from rest_framework import serializers
from .models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    target_model = serializers.SerializerMethodField()
    actor_display = serializers.SerializerMethodField()

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "actor",
            "actor_email",
            "actor_display",
            "ip_address",
            "verb",
            "message",
            "target_model",
            "target_id",
            "changes",
            "extra",
            "created_at",
        ]

    def get_target_model(self, obj):
        return obj.target_ct.model

    def get_actor_display(self, obj):
        if obj.actor:
            return obj.actor.display_name
        return obj.actor_email or "System"
