from django.urls import path
from . import views


app_name = 'tasks'

urlpatterns = [
    path('', views.task_list_view, name='task_list'),
    path('create/', views.task_create_view, name='task_create'),
    path('<int:pk>/toggle/', views.task_toggle_view, name='task_toggle'),
    path('<int:pk>/delete/', views.task_delete_view, name='task_delete'),

    path('notifications/', views.notification_list_view, name='notification_list'),
    path('notifications/<int:pk>/read/', views.notification_read_view, name='notification_read'),
    path('notifications/read-all/', views.notification_read_all_view, name='notification_read_all'),
]
