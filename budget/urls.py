from django.urls import path
from . import views

app_name = 'budget'

urlpatterns = [
    path('api/budget/settings/', views.update_settings, name='update_settings'),
    path('api/budget/alerts/<int:alert_id>/acknowledge/', views.acknowledge_alert, name='acknowledge_alert'),
]
