from django.urls import path
from . import views


app_name = 'automations'

urlpatterns = [
    path('', views.automation_list_view, name='automation_list'),
    path('new/', views.automation_create_view, name='automation_create'),
    path('<int:pk>/edit/', views.automation_edit_view, name='automation_edit'),
    path('<int:pk>/toggle/', views.automation_toggle_view, name='automation_toggle'),
    path('<int:pk>/delete/', views.automation_delete_view, name='automation_delete'),
]
