from django.contrib import admin
from .models import Client, PropertyListing, ContentAsset, Invoice


class PropertyListingInline(admin.TabularInline):

    model = PropertyListing
    extra = 0
    fields = ['address', 'city', 'listing_status', 'price']
    classes = ['collapse']


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['name', 'company_name', 'subscription_tier', 'subscription_status', 'monthly_fee', 'owner']
    list_filter = ['subscription_tier', 'subscription_status', 'company_type']
    search_fields = ['name', 'company_name', 'email']
    inlines = [PropertyListingInline]


@admin.register(PropertyListing)
class PropertyListingAdmin(admin.ModelAdmin):
    list_display = ['address', 'client', 'property_type', 'listing_status', 'price', 'is_featured']
    list_filter = ['listing_status', 'property_type', 'is_featured']
    search_fields = ['address', 'mls_number', 'city']
    list_select_related = ['client']


@admin.register(ContentAsset)
class ContentAssetAdmin(admin.ModelAdmin):
    list_display = ['name', 'asset_type', 'category', 'client', 'is_global']
    list_filter = ['asset_type', 'is_global']
    search_fields = ['name', 'category']


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'client', 'amount', 'status', 'due_date', 'paid_date']
    list_filter = ['status']
    search_fields = ['invoice_number', 'description', 'client__name']
    list_select_related = ['client']
    readonly_fields = ['invoice_number']
