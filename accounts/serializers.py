from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from .enums import UserRole
from .models import User


class UserSerializer(serializers.ModelSerializer):
    displayName = serializers.CharField(source="display_name", read_only=True)
    patientId = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "first_name", "last_name", "displayName", "role", "patientId"]
        read_only_fields = fields

    def get_patientId(self, obj):
        profile = getattr(obj, "patient_profile", None)
        return profile.id if profile else None


class RegisterSerializer(serializers.ModelSerializer):
    """Self-service sign-up. Staff accounts are created by an admin."""
    password = serializers.CharField(write_only=True, min_length=8)

    class Meta:
        model = User
        fields = ["email", "password", "first_name", "last_name", "role"]

    def validate_role(self, value):
        if value and value != UserRole.PATIENT:
            raise serializers.ValidationError("Staff accounts are created by an administrator.")
        return value

    def validate(self, data):
        candidate = User(email=data.get("email"), first_name=data.get("first_name", ""))
        validate_password(data["password"], user=candidate)
        return data

    def create(self, validated):
        validated["role"] = UserRole.PATIENT
        return User.objects.create_user(**validated)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(email=data["email"], password=data["password"])
        if not user or not user.is_active:
            raise serializers.ValidationError("Invalid credentials")
        data["user"] = user
        return data
