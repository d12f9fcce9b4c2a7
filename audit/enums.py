from django.db import models

class Verb(models.TextChoices):
    CREATE = "CREATE", "Create"
    UPDATE = "UPDATE", "Update"
    DELETE = "DELETE", "Delete"
    ACTION = "ACTION", "Case Action"
