from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from . import views

urlpatterns = [
    path("register/", views.register, name="account-register"),
    path("login/", views.login, name="account-login"),
    path("me/", views.me, name="account-me"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
]
