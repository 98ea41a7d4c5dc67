from django.urls import path
from . import views


app_name = 'agency'

urlpatterns = [
    path('clients/', views.client_list_view, name='client_list'),
    path('clients/new/', views.client_create_view, name='client_create'),
    path('clients/<int:pk>/edit/', views.client_edit_view, name='client_edit'),
    path('clients/<int:pk>/delete/', views.client_delete_view, name='client_delete'),

    path('properties/', views.property_list_view, name='property_list'),
    path('properties/new/', views.property_create_view, name='property_create'),
    path('properties/<int:pk>/edit/', views.property_edit_view, name='property_edit'),
    path('properties/<int:pk>/delete/', views.property_delete_view, name='property_delete'),

    path('content/', views.content_list_view, name='content_list'),
    path('content/new/', views.content_create_view, name='content_create'),
    path('content/<int:pk>/edit/', views.content_edit_view, name='content_edit'),
    path('content/<int:pk>/delete/', views.content_delete_view, name='content_delete'),

    path('invoices/', views.invoice_list_view, name='invoice_list'),
    path('invoices/new/', views.invoice_create_view, name='invoice_create'),
    path('invoices/<int:pk>/', views.invoice_detail_view, name='invoice_detail'),
    path('invoices/<int:pk>/edit/', views.invoice_edit_view, name='invoice_edit'),
    path('invoices/<int:pk>/status/', views.invoice_status_view, name='invoice_status'),
    path('invoices/<int:pk>/delete/', views.invoice_delete_view, name='invoice_delete'),
]
