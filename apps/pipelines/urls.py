from django.urls import path
from . import views


app_name = 'pipelines'

urlpatterns = [
    path('', views.pipeline_home_view, name='home'),
    path('all/', views.pipeline_list_view, name='pipeline_list'),
    path('create/', views.pipeline_create_view, name='pipeline_create'),
    path('<int:pk>/', views.kanban_view, name='kanban'),
    path('<int:pk>/edit/', views.pipeline_edit_view, name='pipeline_edit'),
    path('<int:pk>/delete/', views.pipeline_delete_view, name='pipeline_delete'),

    # Opportunities
    path('opportunities/add/', views.opportunity_add_view, name='opportunity_add'),
    path('opportunities/<int:pk>/delete/', views.opportunity_delete_view, name='opportunity_delete'),
    path('bulk-assign/', views.bulk_assign_view, name='bulk_assign'),
]
