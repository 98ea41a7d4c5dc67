from django.urls import path
from . import views


app_name = 'core'

urlpatterns = [
    path('', views.dashboard_view, name='dashboard'),
    path('reports/', views.reports_view, name='reports'),
    path('select-account/', views.account_selector_view, name='account_selector'),
    path('accounts/new/', views.account_create_view, name='account_create'),
    path('settings/account/', views.account_settings_view, name='account_settings'),

    # Tags
    path('tags/', views.tag_list_view, name='tag_list'),
    path('tags/<int:pk>/delete/', views.tag_delete_view, name='tag_delete'),

    # Email templates
    path('email-templates/', views.email_template_list_view, name='email_template_list'),
    path('email-templates/new/', views.email_template_create_view, name='email_template_create'),
    path('email-templates/<int:pk>/edit/', views.email_template_edit_view, name='email_template_edit'),
    path('email-templates/<int:pk>/delete/', views.email_template_delete_view, name='email_template_delete'),
]
