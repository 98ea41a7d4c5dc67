from django.conf import settings
from django.db import models


class Appointment(models.Model):

    STATUS_SCHEDULED = 'scheduled'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_NO_SHOW = 'no_show'

    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_NO_SHOW, 'No Show'),
    ]

    # Only a scheduled appointment can be closed out
    TRANSITIONS = {
        STATUS_SCHEDULED: {STATUS_COMPLETED, STATUS_CANCELLED, STATUS_NO_SHOW},
    }

    contact = models.ForeignKey('contacts.Contact', on_delete=models.CASCADE, related_name='appointments')
    opportunity = models.ForeignKey('pipelines.Opportunity', on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name='appointments')
    title = models.CharField(max_length=200)
    datetime = models.DateTimeField(db_index=True, help_text='Start date and time')
    location = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    assigned_to = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name='appointments')
    notes = models.TextField(blank=True)
    reminder_sent_at = models.DateTimeField(null=True, blank=True, help_text='Set once the reminder notification is created')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Appointment'
        verbose_name_plural = 'Appointments'
        ordering = ['datetime']

    def __str__(self):
        return f"{self.title} with {self.contact} ({self.datetime:%Y-%m-%d %H:%M})"

    @property
    def account(self):
        return self.contact.account

    def can_transition_to(self, status):
        return status in self.TRANSITIONS.get(self.status, set())

    def transition_to(self, status):
        """Change status through the scheduled → completed/cancelled/no_show guard."""
        if not self.can_transition_to(status):
            raise ValueError(
                f'Cannot change appointment status from "{self.status}" to "{status}".'
            )
        self.status = status
        self.save(update_fields=['status', 'updated_at'])
