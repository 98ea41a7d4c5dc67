from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.core.models import Account


class DailyTask(models.Model):

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
    ]

    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name='daily_tasks')
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True,
                              related_name='daily_tasks')
    title = models.CharField(max_length=255)
    completed = models.BooleanField(default=False)
    due_date = models.DateField(default=timezone.localdate, db_index=True)
    scheduled_time = models.TimeField(null=True, blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    is_company_wide = models.BooleanField(default=False, help_text='Visible to every user of the sub-account')

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Daily Task'
        verbose_name_plural = 'Daily Tasks'
        ordering = ['completed', 'due_date', 'scheduled_time', '-created_at']

    def __str__(self):
        return self.title

    def is_overdue(self):
        return not self.completed and self.due_date < timezone.localdate()


class Notification(models.Model):

    TYPE_CHOICES = [
        ('follow_up', 'Follow-up'),
        ('reminder', 'Reminder'),
        ('system', 'System'),
    ]

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='system')
    read = models.BooleanField(default=False)
    link = models.CharField(max_length=255, blank=True)

    # Dedup key for the periodic jobs, e.g. "follow_up:12:2026-10-17"
    source_key = models.CharField(max_length=100, blank=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        ordering = ['-created_at']

    def __str__(self):
        return self.title
