from django.conf import settings
from django.db import models
from django.urls import reverse

from apps.core.models import Account


class Pipeline(models.Model):
    """
    A named, ordered list of stages.

    Stages are plain strings; opportunities reference a stage by name, so
    renaming a stage leaves existing opportunities on the old string.
    """

    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name='pipelines')
    name = models.CharField(max_length=200)
    stages = models.JSONField(default=list, blank=True, help_text='Ordered stage names')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Pipeline'
        verbose_name_plural = 'Pipelines'
        ordering = ['created_at', 'id']

    def __str__(self):
        return self.name

    def get_absolute_url(self):
        return reverse('pipelines:kanban', kwargs={'pk': self.pk})

    def has_stage(self, stage):
        return stage in (self.stages or [])

    def first_stage(self):
        """First stage, or None for a pipeline without stages."""
        return self.stages[0] if self.stages else None


class Opportunity(models.Model):
    """A contact's position in one pipeline."""

    contact = models.ForeignKey('contacts.Contact', on_delete=models.CASCADE, related_name='opportunities')
    pipeline = models.ForeignKey(Pipeline, on_delete=models.CASCADE, related_name='opportunities')
    stage = models.CharField(max_length=100, db_index=True, help_text='Must be one of the pipeline stages when written')
    opportunity_value = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    next_follow_up_date = models.DateField(null=True, blank=True, db_index=True)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                              related_name='opportunities')

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Opportunity'
        verbose_name_plural = 'Opportunities'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['pipeline', 'stage'], name='opportunity_pipeline_stage_idx'),
        ]

    def __str__(self):
        return f"{self.contact} - {self.pipeline} ({self.stage})"

    @property
    def account(self):
        return self.pipeline.account

    def is_orphaned(self):
        """True when the stage no longer exists in the pipeline (after a rename)."""
        return not self.pipeline.has_stage(self.stage)


class StageChange(models.Model):
    """History row written on every successful stage move."""

    opportunity = models.ForeignKey(Opportunity, on_delete=models.CASCADE, related_name='stage_changes')
    from_stage = models.CharField(max_length=100, blank=True)
    to_stage = models.CharField(max_length=100)
    changed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                   related_name='+')
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Stage Change'
        verbose_name_plural = 'Stage Changes'
        ordering = ['-changed_at', '-id']

    def __str__(self):
        return f'{self.from_stage or "-"} → {self.to_stage}'
