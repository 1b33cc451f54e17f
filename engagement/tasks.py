import logging
from celery import shared_task
from .services import reconcile_counters

logger = logging.getLogger(__name__)

@shared_task
def reconcile_engagement_counters(post_ids=None):
    """Nightly repair of post counters that drifted from their membership tables."""
    repaired = reconcile_counters(post_ids)
    logger.info(f"Counter reconciliation finished, {repaired} posts repaired")
    return f"Repaired counters on {repaired} posts"
