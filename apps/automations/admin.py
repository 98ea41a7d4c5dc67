from django.contrib import admin
from .models import Automation


@admin.register(Automation)
class AutomationAdmin(admin.ModelAdmin):
    list_display = ['name', 'account', 'trigger_type', 'status', 'updated_at']
    list_filter = ['status', 'trigger_type', 'account']
    search_fields = ['name', 'description']
