import uuid

from django.conf import settings
from django.core.validators import MinLengthValidator, MinValueValidator, MaxValueValidator, RegexValidator
from django.db import models

from .enums import Gender, Prakriti

phone_validator = RegexValidator(
    regex=r"^\+?\d{10,15}$",
    message="Phone must be 10 to 15 digits, optionally prefixed with +.",
)


def generate_patient_id() -> str:
    return f"pat_{uuid.uuid4().hex[:8]}"


class Patient(models.Model):
    id = models.CharField(primary_key=True, max_length=32, default=generate_patient_id, editable=False)

    # optional link to a self-service login
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="patient_profile"
    )

    full_name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    age = models.PositiveSmallIntegerField(validators=[MinValueValidator(0), MaxValueValidator(150)])
    gender = models.CharField(max_length=1, choices=Gender.choices)
    phone = models.CharField(max_length=16, validators=[phone_validator])
    district = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    state = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    prakriti = models.CharField(max_length=8, choices=Prakriti.choices, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["state", "district"]),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.id})"
