"""
URL configuration for user authentication and registration.
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .views import CurrentUserView, LogoutView, RegisterView

app_name = "users"

urlpatterns = [
    # Registration of Basic users
    path("users/register/", RegisterView.as_view(), name="register"),
    # Authenticated user details
    path("users/me/", CurrentUserView.as_view(), name="me"),
    # Email + password -> JWT access/refresh pair
    path("authenticate/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("authenticate/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("authenticate/logout/", LogoutView.as_view(), name="logout"),
]
