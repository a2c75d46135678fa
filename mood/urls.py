from django.urls import path
from . import views

app_name = 'mood'

urlpatterns = [
    path('api/mood/', views.add_pre_mood, name='add_pre_mood'),
    path('api/mood/<int:mood_id>/post/', views.update_post_mood, name='update_post_mood'),
]
