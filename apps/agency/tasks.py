import logging

from celery import shared_task
from django.utils import timezone

from .models import Invoice

logger = logging.getLogger(__name__)


@shared_task
def mark_overdue_invoices():
    """
    Periodic task, scheduled in config/celery.py

    Sent invoices whose due date has passed become overdue. Running it
    again the same day changes nothing.
    """
    count = Invoice.objects.filter(
        status=Invoice.STATUS_SENT,
        due_date__lt=timezone.localdate(),
    ).update(status=Invoice.STATUS_OVERDUE, updated_at=timezone.now())

    logger.info("Invoices marked overdue: %s", count)
    return f"Marked {count} invoices overdue"
