import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.core.results import Result
from apps.tasks.models import DailyTask
from .models import Appointment

logger = logging.getLogger(__name__)


def schedule_appointment(contact, title, datetime, assigned_to=None, location='',
                         opportunity=None, notes=''):
    """
    Book an appointment for a contact.

    Also adds a high-priority daily task "Appointment: <title> with <contact>"
    for the assignee, due on the appointment's date.
    """
    if opportunity is not None and opportunity.contact_id != contact.pk:
        return Result.failure('Opportunity belongs to another contact.')

    local_start = timezone.localtime(datetime) if timezone.is_aware(datetime) else datetime

    try:
        with transaction.atomic():
            appointment = Appointment.objects.create(
                contact=contact,
                opportunity=opportunity,
                title=title,
                datetime=datetime,
                location=location or '',
                assigned_to=assigned_to,
                notes=notes or '',
            )
            DailyTask.objects.create(
                account=contact.account,
                owner=assigned_to,
                title=f'Appointment: {title} with {contact.name}',
                due_date=local_start.date(),
                scheduled_time=local_start.time().replace(second=0, microsecond=0),
                priority='high',
            )
    except DatabaseError as exc:
        logger.exception("Failed to schedule appointment for contact %s", contact.pk)
        return Result.failure(f'Could not schedule appointment: {exc}')

    logger.info("Appointment %s scheduled for contact %s", appointment.pk, contact.pk)
    return Result.success(appointment)


def change_status(appointment, status):
    """Apply a status action (complete / cancel / no-show) through the model guard."""
    try:
        appointment.transition_to(status)
    except ValueError as exc:
        return Result.failure(str(exc), value=appointment)

    logger.info("Appointment %s marked %s", appointment.pk, status)
    return Result.success(appointment)
