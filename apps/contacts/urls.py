from django.urls import path
from . import views


app_name = 'contacts'

urlpatterns = [
    path('', views.contact_list_view, name='contact_list'),
    path('create/', views.contact_create_view, name='contact_create'),
    path('export/', views.contact_export_view, name='contact_export'),
    path('import/', views.contact_import_view, name='contact_import'),
    path('import/map/', views.contact_import_map_view, name='contact_import_map'),
    path('bulk-delete/', views.contact_bulk_delete_view, name='contact_bulk_delete'),

    path('<int:pk>/', views.contact_detail_view, name='contact_detail'),
    path('<int:pk>/edit/', views.contact_edit_view, name='contact_edit'),
    path('<int:pk>/delete/', views.contact_delete_view, name='contact_delete'),
    path('<int:pk>/tags/', views.contact_tags_view, name='contact_tags'),
    path('<int:pk>/log/', views.contact_log_activity_view, name='contact_log_activity'),
]
