from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import User, UserProfile


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    fk_name = 'user'
    can_delete = False
    max_num = 1
    verbose_name_plural = _('Settings')
    fields = ('follow_up_reminder_enabled', 'follow_up_reminder_time', 'email_notifications',
              'theme', 'default_pipeline')


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'full_name', 'account', 'role', 'is_active', 'last_login')
    list_filter = ('role', 'is_active', 'is_superuser', 'account')
    search_fields = ('email', 'first_name', 'last_name', 'account__name')
    ordering = ('email',)
    list_select_related = ('account',)
    readonly_fields = ('date_joined', 'last_login')
    inlines = [UserProfileInline]

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        (_('Owner'), {'fields': ('first_name', 'last_name', 'account', 'role')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        (_('Dates'), {'fields': ('date_joined', 'last_login'), 'classes': ('collapse',)}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'last_name', 'account', 'role', 'password1', 'password2'),
        }),
    )

    def full_name(self, obj):
        return obj.get_full_name()

    full_name.short_description = _('Name')
    full_name.admin_order_field = 'first_name'
