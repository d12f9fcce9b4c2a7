from rest_framework import serializers

from .enums import Gender, Prakriti
from .models import Patient


class PatientSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source="full_name", min_length=2, max_length=100)
    age = serializers.IntegerField(min_value=0, max_value=150)
    gender = serializers.ChoiceField(choices=Gender.choices)
    phone = serializers.RegexField(r"^\+?\d{10,15}$", min_length=10, max_length=16)
    district = serializers.CharField(min_length=2, max_length=100)
    state = serializers.CharField(min_length=2, max_length=100)
    prakriti = serializers.ChoiceField(choices=Prakriti.choices, required=False, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Patient
        fields = [
            "id", "fullName", "age", "gender", "phone",
            "district", "state", "prakriti",
            "createdAt", "updatedAt",
        ]
        read_only_fields = ["id"]


class PatientSummarySerializer(serializers.ModelSerializer):
    """Compact patient block embedded in case payloads."""
    fullName = serializers.CharField(source="full_name", read_only=True)

    class Meta:
        model = Patient
        fields = ["id", "fullName", "age", "gender", "prakriti"]
