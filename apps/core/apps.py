from django.apps import AppConfig


class CoreConfig(AppConfig):
    """
    Configuration for Core application

    This app contains:
        - Account model (sub-accounts)
        - Tag model (contact tags)
        - EmailTemplate model
        - Dashboard, account selector, tags manager
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'
