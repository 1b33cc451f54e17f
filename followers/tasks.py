import logging
from celery import shared_task
from .services import reconcile_follow_counts

logger = logging.getLogger(__name__)

@shared_task
def reconcile_follow_counts_task(user_ids=None):
    """Repair follower/following counters that drifted from the accepted edges."""
    repaired = reconcile_follow_counts(user_ids)
    if repaired:
        logger.warning(f"Repaired follow counters on {repaired} profiles")
    return f"Repaired follow counters on {repaired} profiles"
