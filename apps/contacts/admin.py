from django.contrib import admin
from django.utils.html import format_html
from .models import Contact, Activity


class ActivityInline(admin.TabularInline):

    model = Activity
    fk_name = 'contact'
    extra = 0  # Activities are logged from the contact page
    readonly_fields = ['logged_at', 'logged_by', 'outcome', 'channel', 'notes', 'next_action']
    fields = ['logged_at', 'logged_by', 'outcome', 'channel', 'notes', 'next_action']
    classes = ['collapse']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('logged_by')


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):

    list_display = [
        'id',
        'name',
        'email',
        'phone',
        'business_name',
        'score_badge',
        'owner',
        'account',
        'last_contacted_at',
        'created_at',
    ]

    list_filter = [
        'account',
        'lead_score',
        'owner',
        'created_at',
    ]

    search_fields = [
        'name',
        'email',
        'phone',
        'business_name',
    ]

    ordering = ['-created_at']
    list_per_page = 50
    date_hierarchy = 'created_at'
    list_select_related = ['owner', 'account']
    readonly_fields = ['last_contacted_at', 'created_at', 'updated_at']
    inlines = [ActivityInline]

    fieldsets = [
        ('Identity', {
            'fields': ['account', 'name', 'email', 'phone', 'business_name', 'source']
        }),
        ('Address & Links', {
            'fields': ['address', 'city', 'postal_code', 'website', 'linkedin_url'],
            'classes': ['collapse'],
        }),
        ('Ownership', {
            'fields': ['owner', 'lead_score', 'tags', 'notes']
        }),
        ('Timestamps', {
            'fields': ['last_contacted_at', 'created_at', 'updated_at'],
            'classes': ['collapse'],
        }),
    ]

    def score_badge(self, obj):
        if not obj.lead_score:
            return '-'
        colors = {
            'hot': '#dc3545',
            'warm': '#fd7e14',
            'cold': '#0d6efd',
        }
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 10px; border-radius: 3px; font-size: 11px;">{}</span>',
            colors.get(obj.lead_score, '#6c757d'),
            obj.get_lead_score_display()
        )

    score_badge.short_description = 'Lead Score'
    score_badge.admin_order_field = 'lead_score'


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ['contact', 'outcome', 'channel', 'logged_by', 'logged_at']
    list_filter = ['outcome', 'channel', 'logged_at']
    search_fields = ['contact__name', 'notes', 'next_action']
    list_select_related = ['contact', 'logged_by']
    readonly_fields = ['logged_at']
