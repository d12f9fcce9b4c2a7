from django.contrib import admin
from .models import Case

@admin.register(Case)
class CaseAdmin(admin.ModelAdmin):
    list_display = ("id","patient","status","priority","source","processing_status","created_at")
    list_filter  = ("status","priority","source","processing_status")
    search_fields = ("id","chief_complaint","patient__full_name")
    readonly_fields = (
        "id","patient","status","source","structured_summary","clinical_flags","recommendation",
        "processing_status","processing_error","reviewed_by","reviewed_at","version","created_at","updated_at",
    )

    def has_add_permission(self, request):
        # Cases enter through the API so intake safety checks always run.
        return False

    def has_delete_permission(self, request, obj=None):
        return False
