from django.urls import path
from . import views

urlpatterns = [
    path("process/<str:case_id>/", views.process_case, name="ai-process"),
    path("status/<str:case_id>/", views.processing_status, name="ai-status"),
    path("recommendation/<str:case_id>/", views.recommendation, name="ai-recommendation"),
    path("summary/<str:case_id>/", views.summary, name="ai-summary"),
    path("pipeline/", views.pipeline, name="ai-pipeline"),
    path("health/", views.health, name="ai-health"),
]
