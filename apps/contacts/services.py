import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.core.results import Result
from .models import Activity

logger = logging.getLogger(__name__)


def log_activity(contact, outcome, channel, logged_by, notes='', next_action='',
                 opportunity=None, next_follow_up=None):
    """
    Record an outreach attempt.

    Inserts the Activity, stamps ``contact.last_contacted_at`` with the
    current time and, when ``next_follow_up`` is given, sets the
    opportunity's follow-up date. All three writes share one transaction.
    """
    valid_outcomes = {value for value, _label in Activity.OUTCOME_CHOICES}
    if outcome not in valid_outcomes:
        return Result.failure(f'Unknown outcome "{outcome}".')

    valid_channels = {value for value, _label in Activity.CHANNEL_CHOICES}
    if channel not in valid_channels:
        return Result.failure(f'Unknown channel "{channel}".')

    if opportunity is not None and opportunity.contact_id != contact.pk:
        return Result.failure('Opportunity belongs to another contact.')

    now = timezone.now()
    previous_contacted_at = contact.last_contacted_at
    previous_follow_up = opportunity.next_follow_up_date if opportunity is not None else None

    try:
        with transaction.atomic():
            activity = Activity.objects.create(
                contact=contact,
                opportunity=opportunity,
                outcome=outcome,
                channel=channel,
                notes=notes or '',
                next_action=next_action or '',
                logged_by=logged_by,
            )

            if opportunity is not None and next_follow_up:
                opportunity.next_follow_up_date = next_follow_up
                opportunity.save(update_fields=['next_follow_up_date', 'updated_at'])

            contact.last_contacted_at = now
            contact.save(update_fields=['last_contacted_at', 'updated_at'])
    except DatabaseError as exc:
        contact.last_contacted_at = previous_contacted_at
        if opportunity is not None:
            opportunity.next_follow_up_date = previous_follow_up
        logger.exception("Failed to log activity for contact %s", contact.pk)
        return Result.failure(f'Could not log activity: {exc}')

    logger.info("Activity %s (%s) logged for contact %s", activity.pk, outcome, contact.pk)
    return Result.success(activity)
