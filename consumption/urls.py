from django.urls import path
from . import views

app_name = 'consumption'

urlpatterns = [
    path('api/entries/', views.log_entry, name='log_entry'),
    path('api/entries/recent/', views.recent_entries, name='recent_entries'),
    path('api/entries/<int:entry_id>/update/', views.update_entry, name='update_entry'),
    path('api/entries/<int:entry_id>/delete/', views.delete_entry, name='delete_entry'),
    path('api/raw-products/', views.add_raw_product, name='add_raw_product'),
    path('api/raw-products/<int:product_id>/update/', views.update_raw_product, name='update_raw_product'),
    path('api/raw-products/<int:product_id>/delete/', views.delete_raw_product, name='delete_raw_product'),
    path('api/consumables/convert/', views.convert_to_consumable, name='convert_to_consumable'),
    path('api/consumables/<int:consumable_id>/update/', views.update_consumable, name='update_consumable'),
    path('api/consumables/<int:consumable_id>/delete/', views.delete_consumable, name='delete_consumable'),
    path('api/consumables/<int:consumable_id>/archive/', views.archive_consumable, name='archive_consumable'),
]
