import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.urls import reverse
from django.utils import timezone

from apps.pipelines.models import Opportunity
from .models import Notification

logger = logging.getLogger(__name__)


@shared_task
def send_follow_up_reminders():
    """
    Notify owners about opportunities whose follow-up date is today or overdue.

    Owners who switched follow-up reminders off in their settings are
    skipped. At most one notification per opportunity per day is created,
    so the task can safely run more than once.
    """
    today = timezone.localdate()

    opportunities = Opportunity.objects.filter(
        next_follow_up_date__lte=today,
    ).select_related('contact', 'contact__owner', 'owner', 'owner__profile', 'pipeline')

    sent = 0
    for opportunity in opportunities:
        owner = opportunity.owner or opportunity.contact.owner
        if owner is None or not owner.is_active:
            continue

        profile = owner.settings
        if not profile.follow_up_reminder_enabled:
            continue

        key = f'follow_up:{opportunity.pk}:{today.isoformat()}'
        if Notification.objects.filter(owner=owner, source_key=key).exists():
            continue

        overdue = opportunity.next_follow_up_date < today
        title = f'Follow up with {opportunity.contact.name}'
        message = (
            f'{"Overdue since" if overdue else "Due"} {opportunity.next_follow_up_date:%Y-%m-%d} '
            f'({opportunity.pipeline.name}: {opportunity.stage})'
        )

        Notification.objects.create(
            owner=owner,
            type='follow_up',
            title=title,
            message=message,
            link=reverse('contacts:contact_detail', kwargs={'pk': opportunity.contact_id}),
            source_key=key,
        )

        if profile.email_notifications and owner.email:
            send_mail(
                subject=title,
                message=message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[owner.email],
            )

        sent += 1

    logger.info("Follow-up reminders sent: %s", sent)
    return f'{sent} follow-up reminders sent.'
