from django.urls import path
from . import views

app_name = 'tolerance'

urlpatterns = [
    path('api/tolerance/', views.add_checkin, name='add_checkin'),
]
