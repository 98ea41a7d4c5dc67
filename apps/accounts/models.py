import datetime

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Email-keyed manager; superusers are agency owners and always admins."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError(_('Users must have an email address'))

        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)

        user = self.model(email=self.normalize_email(email).lower(), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', 'admin')

        if not extra_fields['is_staff'] or not extra_fields['is_superuser']:
            raise ValueError(_('Superuser must have is_staff=True and is_superuser=True'))

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    A CRM user, and the "owner" that contacts, opportunities, activities
    and tasks are assigned to.

    Agents and admins work inside one sub-account (``account``).
    Superusers have no fixed account and pick one in the account selector.
    """

    ROLE_CHOICES = [
        ('admin', _('Administrator')),
        ('agent', _('Agent')),
    ]

    email = models.EmailField(_('email address'), unique=True, max_length=255, db_index=True, help_text=_('Required. Used for login.'))
    first_name = models.CharField(_('first name'), max_length=50, blank=True)
    last_name = models.CharField(_('last name'), max_length=50, blank=True)

    account = models.ForeignKey('core.Account', on_delete=models.CASCADE, related_name='users',
                                null=True, blank=True, verbose_name=_('account'),
                                help_text=_('The sub-account this user works in'))

    role = models.CharField(_('role'), max_length=20, choices=ROLE_CHOICES, default='agent', db_index=True,
                            help_text=_('User role: admin (full access) or agent (limited access)'))

    is_active = models.BooleanField(_('active'), default=True, help_text=_('Unselect this instead of deleting accounts.'))
    is_staff = models.BooleanField(_('staff status'), default=False, help_text=_('Designates whether the user can log into admin site.'))
    date_joined = models.DateTimeField(_('date joined'), default=timezone.now)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name']

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['first_name', 'last_name', 'email']
        indexes = [
            models.Index(fields=['account', 'role'], name='user_account_role_idx'),
        ]

    def __str__(self):
        return self.get_full_name()

    def get_full_name(self):
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.email

    def get_short_name(self):
        return self.first_name or self.email

    def get_initials(self):
        initials = ''.join(part[0] for part in (self.first_name, self.last_name) if part)
        return (initials or self.email[0]).upper()

    def is_admin(self):
        return self.role == 'admin' or self.is_superuser

    def is_agent(self):
        return self.role == 'agent'

    @property
    def settings(self):
        """The user's UserProfile, created on first access if missing."""
        profile, _created = UserProfile.objects.get_or_create(user=self)
        return profile


class UserProfile(models.Model):
    """
    Per-user settings: follow-up reminders, email notifications, theme and
    the pipeline the kanban board opens by default.

    Created by the post_save signal in ``signals.py``.
    """

    THEME_CHOICES = [
        ('light', _('Light')),
        ('dark', _('Dark')),
        ('system', _('System')),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile', verbose_name=_('user'))
    follow_up_reminder_enabled = models.BooleanField(_('follow-up reminders'), default=True,
                                                     help_text=_('Notify me about follow-ups that are due'))
    follow_up_reminder_time = models.TimeField(_('reminder time'), default=datetime.time(9, 0),
                                               help_text=_('Time of day for the follow-up reminder'))
    email_notifications = models.BooleanField(_('email notifications'), default=True, help_text=_('Receive notifications via email'))
    theme = models.CharField(_('theme'), max_length=20, choices=THEME_CHOICES, default='light', help_text=_('UI theme preference'))
    default_pipeline = models.ForeignKey('pipelines.Pipeline', on_delete=models.SET_NULL, null=True, blank=True,
                                         related_name='+', verbose_name=_('default pipeline'))
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('user settings')
        verbose_name_plural = _('user settings')

    def __str__(self):
        return f"Settings for: {self.user.get_full_name()}"
