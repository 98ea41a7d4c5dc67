from django.conf import settings
from django.db import models
from django.utils.text import slugify
from taggit.models import TagBase


def default_pipeline_stages():
    return list(settings.DEFAULT_PIPELINE_STAGES)


class Account(models.Model):
    """
    A sub-account (one client organisation managed by the agency).

    Every contact, pipeline, appointment and task row belongs to exactly
    one sub-account.
    """

    # Basic Information
    name = models.CharField(max_length=200, help_text="Sub-account name")
    slug = models.SlugField(max_length=200, unique=True, help_text="URL-friendly name (auto-generated)")
    company_name = models.CharField(max_length=200, blank=True, help_text="Legal/business name of the client")
    industry = models.CharField(max_length=100, blank=True, help_text="e.g. Real Estate, Dental, SaaS")

    # Branding
    primary_color = models.CharField(max_length=7, default='#2563eb', help_text="Hex color code")
    secondary_color = models.CharField(max_length=7, default='#64748b', help_text="Hex color code")
    logo = models.ImageField(upload_to='accounts/logos/', null=True, blank=True, help_text="Sub-account logo")

    # Stages used to seed the default pipeline
    pipeline_stages = models.JSONField(default=default_pipeline_stages, blank=True,
                                       help_text="Ordered stage names for the default pipeline")

    # Status
    is_active = models.BooleanField(default=True, help_text="Is sub-account active?")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Sub-account"
        verbose_name_plural = "Sub-accounts"
        ordering = ['name']
        indexes = [
            models.Index(fields=['is_active'], name='account_is_active_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            base = slugify(self.name) or 'account'
            slug = base
            counter = 2
            while Account.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f"{base}-{counter}"
                counter += 1
            self.slug = slug
        super().save(*args, **kwargs)

    def create_default_pipeline(self):
        """Create the "Sales Pipeline" seeded with this account's stages."""
        from apps.pipelines.models import Pipeline

        stages = [s for s in (self.pipeline_stages or []) if s] or default_pipeline_stages()
        return Pipeline.objects.create(account=self, name='Sales Pipeline', stages=stages)

    def get_active_users_count(self):
        return self.users.filter(is_active=True).count()


class Tag(TagBase):
    """Contact tag with a display color (used through django-taggit)."""

    color = models.CharField(max_length=7, default='#6366f1', help_text="Hex color code for UI display")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Tag"
        verbose_name_plural = "Tags"
        ordering = ['name']


class EmailTemplate(models.Model):

    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name='email_templates')
    name = models.CharField(max_length=200)
    subject = models.CharField(max_length=255)
    content = models.TextField(help_text="Body of the email. Supports {{ name }} placeholders.")
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name='+')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Email Template"
        verbose_name_plural = "Email Templates"
        ordering = ['name']

    def __str__(self):
        return self.name
