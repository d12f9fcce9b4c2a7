from django.urls import path
from . import views

urlpatterns = [
    path("chat/", views.chat, name="bridge-chat"),
    path("bookings/", views.bookings, name="bridge-bookings"),
    path("stats/", views.stats, name="bridge-stats"),
]
