"""
families/signals.py

Audit logging for directory writes.
"""
import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Family, FamilyMember

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Family)
def log_family_saved(sender, instance, created, **kwargs):
    if created:
        logger.info(f"Family registered: {instance.family_code} (id={instance.pk})")


@receiver(post_save, sender=FamilyMember)
def log_member_saved(sender, instance, created, **kwargs):
    if created:
        logger.info(
            f"Member added to family {instance.family_id}: "
            f"{instance.name} ({instance.relation})"
        )


@receiver(post_delete, sender=Family)
def log_family_deleted(sender, instance, **kwargs):
    logger.info(f"Family deleted: {instance.family_code} (id={instance.pk})")
