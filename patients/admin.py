from django.contrib import admin
from .models import Patient

@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("id","full_name","age","gender","district","state","prakriti","created_at")
    search_fields = ("id","full_name","phone")
    list_filter = ("gender","prakriti","state")
    readonly_fields = ("id","created_at","updated_at")
