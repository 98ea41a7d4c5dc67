# Celery runs the CRM's periodic background jobs:
# - Follow-up reminders for opportunities that are due or overdue
# - Appointment reminders shortly before an appointment starts
# - Sent invoices past their due date become overdue
#
# Start worker: celery -A config worker -l info
# Start beat: celery -A config beat -l info

import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for Celery
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('agency_crm')

# All settings prefixed with 'CELERY_' will be used
# Example: CELERY_BROKER_URL, CELERY_RESULT_BACKEND
app.config_from_object('django.conf:settings', namespace='CELERY')

# Looks for tasks.py in each installed app
# Example: apps/tasks/tasks.py, apps/appointments/tasks.py
app.autodiscover_tasks()


# CELERY BEAT SCHEDULE (Periodic Tasks)

app.conf.beat_schedule = {
    # Daily follow-up notifications at 8 AM
    'send-follow-up-reminders': {
        'task': 'apps.tasks.tasks.send_follow_up_reminders',
        'schedule': crontab(hour=8, minute=0),
    },

    # Upcoming appointment notifications every 15 minutes
    'send-appointment-reminders': {
        'task': 'apps.appointments.tasks.send_reminders',
        'schedule': crontab(minute='*/15'),
    },

    # Past-due sent invoices at 1 AM
    'mark-overdue-invoices': {
        'task': 'apps.agency.tasks.mark_overdue_invoices',
        'schedule': crontab(hour=1, minute=0),
    },
}
