from django.db import models

from apps.core.models import Account


class Automation(models.Model):
    """
    A stored trigger → actions definition.

    Definitions are edited and toggled here; nothing in this project
    executes them.
    """

    TRIGGER_CHOICES = [
        ('contact_created', 'Contact Created'),
        ('contact_updated', 'Contact Updated'),
        ('pipeline_stage_changed', 'Pipeline Stage Changed'),
        ('appointment_booked', 'Appointment Booked'),
        ('form_submitted', 'Form Submitted'),
        ('tag_added', 'Tag Added'),
    ]

    ACTION_CHOICES = [
        ('send_email', 'Send Email'),
        ('send_sms', 'Send SMS'),
        ('add_tag', 'Add Tag'),
        ('remove_tag', 'Remove Tag'),
        ('move_pipeline', 'Move in Pipeline'),
        ('create_task', 'Create Task'),
        ('wait', 'Wait'),
        ('webhook', 'Webhook'),
    ]

    STATUS_CHOICES = [
        ('active', 'Active'),
        ('paused', 'Paused'),
    ]

    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name='automations')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    trigger_type = models.CharField(max_length=50, choices=TRIGGER_CHOICES)
    trigger_config = models.JSONField(default=dict, blank=True, help_text='e.g. {"pipeline_id": 1, "stage": "Demo"}')
    actions = models.JSONField(default=list, blank=True, help_text='List of {"type": ..., "config": {...}}')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Automation'
        verbose_name_plural = 'Automations'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def toggle(self):
        self.status = 'paused' if self.status == 'active' else 'active'
        self.save(update_fields=['status', 'updated_at'])
        return self.status

    def action_labels(self):
        labels = dict(self.ACTION_CHOICES)
        return [labels.get(a.get('type'), a.get('type')) for a in (self.actions or []) if isinstance(a, dict)]
