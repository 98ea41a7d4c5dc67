from django.contrib import admin
from .models import DailyTask, Notification


@admin.register(DailyTask)
class DailyTaskAdmin(admin.ModelAdmin):
    list_display = ['title', 'owner', 'account', 'due_date', 'scheduled_time', 'priority', 'completed', 'is_company_wide']
    list_filter = ['completed', 'priority', 'is_company_wide', 'account', 'due_date']
    search_fields = ['title']
    list_select_related = ['owner', 'account']


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['title', 'owner', 'type', 'read', 'created_at']
    list_filter = ['type', 'read', 'created_at']
    search_fields = ['title', 'message']
    readonly_fields = ['source_key', 'created_at']
