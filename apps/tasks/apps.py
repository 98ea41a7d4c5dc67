from django.apps import AppConfig


class TasksConfig(AppConfig):
    """Daily tasks, notifications and the follow-up reminder job."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.tasks'
    verbose_name = 'Tasks & Notifications'
