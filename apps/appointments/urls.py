from django.urls import path
from . import views


app_name = 'appointments'

urlpatterns = [
    path('', views.calendar_view, name='calendar'),
    path('new/', views.appointment_create_view, name='appointment_create'),
    path('<int:pk>/edit/', views.appointment_edit_view, name='appointment_edit'),
    path('<int:pk>/status/', views.appointment_status_view, name='appointment_status'),
    path('<int:pk>/delete/', views.appointment_delete_view, name='appointment_delete'),
]
