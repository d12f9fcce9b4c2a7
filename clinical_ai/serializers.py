from rest_framework import serializers

from .models import ClinicalSummary, Recommendation


class RecommendationSerializer(serializers.ModelSerializer):
    caseFileId = serializers.CharField(source="case_file_id", read_only=True)
    generatedAt = serializers.DateTimeField(source="generated_at", read_only=True)
    aiModelVersion = serializers.CharField(source="ai_model_version", read_only=True)
    confidenceScore = serializers.IntegerField(source="confidence_score", read_only=True)
    redFlags = serializers.JSONField(source="red_flags", read_only=True)
    estimatedCostRange = serializers.JSONField(source="estimated_cost_range", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Recommendation
        fields = (
            "id",
            "caseFileId",
            "generatedAt",
            "aiModelVersion",
            "confidenceScore",
            "allopathy",
            "ayurveda",
            "contraindications",
            "redFlags",
            "estimatedCostRange",
            "disclaimer",
            "createdAt",
        )
        read_only_fields = fields


class ClinicalSummarySerializer(serializers.ModelSerializer):
    caseFileId = serializers.CharField(source="case_file_id", read_only=True)
    riskFlags = serializers.JSONField(source="risk_flags", read_only=True)
    urgencyLevel = serializers.CharField(source="urgency_level", read_only=True)
    keySymptoms = serializers.JSONField(source="key_symptoms", read_only=True)
    suggestedFollowUp = serializers.CharField(source="suggested_follow_up", read_only=True)
    confidenceScore = serializers.IntegerField(source="confidence_score", read_only=True)
    modelVersion = serializers.CharField(source="model_version", read_only=True)
    isAIGenerated = serializers.BooleanField(source="is_ai_generated", read_only=True)
    processingTimeMs = serializers.IntegerField(source="processing_time_ms", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = ClinicalSummary
        fields = (
            "id",
            "caseFileId",
            "summary",
            "riskFlags",
            "urgencyLevel",
            "keySymptoms",
            "suggestedFollowUp",
            "confidenceScore",
            "modelVersion",
            "isAIGenerated",
            "processingTimeMs",
            "disclaimer",
            "createdAt",
        )
        read_only_fields = fields
