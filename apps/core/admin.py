from django.contrib import admin
from django.utils.html import format_html
from .models import Account, Tag, EmailTemplate


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):

    list_display = [
        'name',
        'company_name',
        'industry',
        'status_badge',
        'users_count',
        'created_at'
    ]
    list_filter = ['is_active', 'industry', 'created_at']
    search_fields = ['name', 'company_name', 'industry']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'slug', 'company_name', 'industry')
        }),
        ('Branding', {
            'fields': ('logo', 'primary_color', 'secondary_color')
        }),
        ('Pipeline', {
            'fields': ('pipeline_stages',),
            'description': 'Stages used to seed the default pipeline of a new sub-account'
        }),
        ('Status', {
            'fields': ('is_active',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def status_badge(self, obj):
        color, label = ('#16a34a', 'Active') if obj.is_active else ('#dc2626', 'Inactive')
        return format_html(
            '<span style="background: {}; color: #fff; padding: 2px 8px; border-radius: 3px;">{}</span>',
            color, label
        )

    status_badge.short_description = 'Status'

    def users_count(self, obj):
        return obj.get_active_users_count()

    users_count.short_description = 'Active users'


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):

    list_display = ['name', 'color_preview', 'created_at']
    search_fields = ['name']
    prepopulated_fields = {'slug': ('name',)}

    def color_preview(self, obj):
        return format_html(
            '<div style="width: 40px; height: 20px; background-color: {}; '
            'border-radius: 3px; border: 1px solid #ddd;"></div>',
            obj.color
        )

    color_preview.short_description = 'Color'


@admin.register(EmailTemplate)
class EmailTemplateAdmin(admin.ModelAdmin):
    list_display = ['name', 'subject', 'account', 'created_by', 'updated_at']
    list_filter = ['account']
    search_fields = ['name', 'subject']
    list_select_related = ['account', 'created_by']
