import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.urls import reverse
from django.utils import timezone

from apps.tasks.models import Notification
from .models import Appointment

logger = logging.getLogger(__name__)


@shared_task
def send_reminders():
    """
    Periodic task to send appointment reminders.
    Scheduled in config/celery.py

    Creates one reminder notification per scheduled appointment starting
    within APPOINTMENT_REMINDER_WINDOW_MINUTES. Appointments already
    reminded are skipped, so overlapping runs do not duplicate.
    """
    now = timezone.now()
    window_end = now + timedelta(minutes=settings.APPOINTMENT_REMINDER_WINDOW_MINUTES)

    due = Appointment.objects.filter(
        status=Appointment.STATUS_SCHEDULED,
        datetime__gte=now,
        datetime__lte=window_end,
        reminder_sent_at__isnull=True,
        assigned_to__isnull=False,
    ).select_related('contact', 'assigned_to')

    sent = 0
    for appointment in due:
        start = timezone.localtime(appointment.datetime)
        Notification.objects.create(
            owner=appointment.assigned_to,
            type='reminder',
            title=f'Upcoming: {appointment.title}',
            message=f'{appointment.title} with {appointment.contact.name} at {start:%H:%M}'
                    + (f' ({appointment.location})' if appointment.location else ''),
            link=reverse('contacts:contact_detail', kwargs={'pk': appointment.contact_id}),
            source_key=f'reminder:{appointment.pk}',
        )
        appointment.reminder_sent_at = now
        appointment.save(update_fields=['reminder_sent_at'])
        sent += 1

    logger.info("Appointment reminders sent: %s", sent)
    return f"Sent {sent} appointment reminders"
