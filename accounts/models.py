from django.contrib.auth.base_user import BaseUserManager
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _

from .enums import UserRole


class UserManager(BaseUserManager):
    """Email is the login; there is no username column."""
    use_in_migrations = True

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("An email address is required")
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        user = self.model(email=self.normalize_email(email), **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.update(is_staff=True, is_superuser=True)
        extra_fields.setdefault("role", UserRole.ADMIN)
        return self.create_user(email, password, **extra_fields)

    def clinicians(self):
        return self.filter(role__in=UserRole.reviewer_roles(), is_active=True)


class User(AbstractUser):
    username = None
    email = models.EmailField(_("email address"), unique=True)
    role = models.CharField(max_length=20, choices=UserRole.choices, default=UserRole.PATIENT)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    @property
    def display_name(self) -> str:
        """Name recorded as ``reviewedBy`` when a doctor reviews a case."""
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.email

    @property
    def is_clinical_staff(self) -> bool:
        return self.role in UserRole.staff_roles()

    @property
    def can_review(self) -> bool:
        return self.role in UserRole.reviewer_roles()

    def __str__(self):
        return f"{self.display_name} <{self.email}> [{self.role}]"
