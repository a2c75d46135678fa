"""
URL configuration for the greenery project.

JSON write endpoints live in each app's urls; the read-only analytics
endpoints are in greenery.views.
"""

from django.contrib import admin
from django.urls import path, include
from greenery import views

urlpatterns = [
    path("admin/", admin.site.urls),
    path("accounts/", include("django.contrib.auth.urls")),
    path("api/dashboard/", views.dashboard, name='dashboard'),
    path("api/analytics/", views.consumption_analytics, name='consumption_analytics'),
    path("api/inventory/", views.inventory_overview, name='inventory_overview'),
    path("api/tolerance/overview/", views.tolerance_overview, name='tolerance_overview'),
    path("api/mood/overview/", views.mood_overview, name='mood_overview'),
    path("api/budget/overview/", views.budget_overview, name='budget_overview'),
    path("", include("consumption.urls")),
    path("", include("tolerance.urls")),
    path("", include("mood.urls")),
    path("", include("budget.urls")),
]
