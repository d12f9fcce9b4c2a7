from django.db import models

class Gender(models.TextChoices):
    MALE   = "M","Male"
    FEMALE = "F","Female"
    OTHER  = "O","Other"

class Prakriti(models.TextChoices):
    """Ayurvedic constitution; selects advisory templates only."""
    VATA  = "VATA","Vata"
    PITTA = "PITTA","Pitta"
    KAPHA = "KAPHA","Kapha"
