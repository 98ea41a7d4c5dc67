from django.contrib import admin
from django.utils.html import format_html
from .models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ['title', 'contact', 'datetime', 'status_badge', 'assigned_to', 'reminder_sent_at']
    list_filter = ['status', 'assigned_to', 'datetime']
    search_fields = ['title', 'contact__name', 'location']
    date_hierarchy = 'datetime'
    list_select_related = ['contact', 'assigned_to']
    readonly_fields = ['reminder_sent_at', 'created_at', 'updated_at']

    def status_badge(self, obj):
        colors = {
            'scheduled': '#0d6efd',
            'completed': '#28a745',
            'cancelled': '#6c757d',
            'no_show': '#dc3545',
        }
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 10px; border-radius: 3px; font-size: 11px;">{}</span>',
            colors.get(obj.status, '#6c757d'),
            obj.get_status_display()
        )

    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'
