from django.contrib import admin
from .models import ClinicalSummary, Recommendation

@admin.register(Recommendation)
class RecommendationAdmin(admin.ModelAdmin):
    list_display = ("id","case_file_id","ai_model_version","confidence_score","generated_at")
    search_fields = ("id","case_file_id")
    readonly_fields = [f.name for f in Recommendation._meta.fields]

    def has_add_permission(self, request):
        return False


@admin.register(ClinicalSummary)
class ClinicalSummaryAdmin(admin.ModelAdmin):
    list_display = ("case_file_id","urgency_level","is_ai_generated","model_version","processing_time_ms","updated_at")
    list_filter = ("urgency_level","is_ai_generated")
    search_fields = ("case_file_id","summary")
    readonly_fields = [f.name for f in ClinicalSummary._meta.fields]
