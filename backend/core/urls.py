"""
Root URL configuration for the Personal Ledger backend.

Routes the admin site, authentication and registration endpoints of the
users app, and the ledger API.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("users.urls")),
    path("api/ledger/", include("ledger.urls")),
]
