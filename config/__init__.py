# Load the Celery app whenever Django starts so that shared_task
# decorators bind to it and beat picks up the schedule.
from .celery import app as celery_app

__all__ = ('celery_app',)
