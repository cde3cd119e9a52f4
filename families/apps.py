from django.apps import AppConfig


class FamiliesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name               = "families"
    verbose_name       = "Family Directory"

    def ready(self):
        # Register signal handlers
        import families.signals  # noqa: F401
