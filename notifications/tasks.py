import logging
from datetime import timedelta
from celery import shared_task
from django.conf import settings
from django.utils import timezone
from .models import Notification

logger = logging.getLogger(__name__)

@shared_task
def cleanup_old_notifications(days=None):
    """Delete read notifications older than the retention window."""
    days = days if days is not None else settings.NOTIFICATION_RETENTION_DAYS
    cutoff = timezone.now() - timedelta(days=days)
    deleted, _ = Notification.objects.filter(is_read=True, created_at__lt=cutoff).delete()
    logger.info(f"Deleted {deleted} read notifications older than {days} days")
    return f"Deleted {deleted} notifications"
