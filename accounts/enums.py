from django.db import models

class UserRole(models.TextChoices):
    ADMIN   = "ADMIN", "Admin"
    DOCTOR  = "DOCTOR", "Doctor"
    INTAKE  = "INTAKE", "Intake Coordinator"
    PATIENT = "PATIENT", "Patient"

    @classmethod
    def staff_roles(cls):
        return {cls.ADMIN, cls.DOCTOR, cls.INTAKE}

    @classmethod
    def reviewer_roles(cls):
        return {cls.ADMIN, cls.DOCTOR}
