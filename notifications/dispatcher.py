"""Explicit notification dispatch.

Services call :func:`dispatch` inside the same ``transaction.atomic()`` block
as the state change that caused it, so the membership row, the counter and
the notification commit or roll back together.
"""
import logging
from django.utils import timezone
from .models import ActionStatus, Notification, NotificationKind, NotificationPreference

logger = logging.getLogger(__name__)

TITLES = {
    NotificationKind.FOLLOW_REQUEST: "{actor} sent you a follow request",
    NotificationKind.FOLLOW_ACCEPTED: "{actor} accepted your follow request",
    NotificationKind.NEW_FOLLOWER: "{actor} started following you",
    NotificationKind.LIKE: "{actor} liked your post",
    NotificationKind.COMMENT: "{actor} commented on your post",
}


def build_idempotency_key(recipient_id, actor_id, kind, post_id=None, follow_id=None, comment_id=None):
    parts = (recipient_id, actor_id, kind, post_id, follow_id, comment_id)
    return ":".join("-" if part is None else str(part) for part in parts)


def get_preferences(user_id):
    return NotificationPreference.objects.get_or_create(user_id=user_id)[0]


def _actor_name(actor_id):
    from profiles.models import Profile

    name = Profile.objects.filter(user_id=actor_id).values_list("profile_name", flat=True).first()
    return name or "Someone"


def dispatch(recipient_id, actor_id, kind, post=None, follow=None, comment=None, message=""):
    """Create at most one notification per idempotency key.

    Returns the stored notification (new or previously created), or ``None``
    when the event is suppressed: self-notification or a muted kind.
    """
    if actor_id is not None and actor_id == recipient_id:
        logger.debug(f"Suppressed self-notification {kind} for user {recipient_id}")
        return None

    if not get_preferences(recipient_id).allows(kind):
        logger.debug(f"User {recipient_id} muted {kind}; nothing dispatched")
        return None

    post_id = getattr(post, "pk", post)
    follow_id = getattr(follow, "pk", follow)
    comment_id = getattr(comment, "pk", comment)
    key = build_idempotency_key(recipient_id, actor_id, kind, post_id, follow_id, comment_id)
    title = TITLES.get(kind, "{actor} interacted with you").format(actor=_actor_name(actor_id))

    notification, created = Notification.objects.get_or_create(
        idempotency_key=key,
        defaults={
            "recipient_id": recipient_id,
            "actor_id": actor_id,
            "kind": kind,
            "post_id": post_id,
            "follow_id": follow_id,
            "comment_id": comment_id,
            "title": title,
            "message": message or "",
            "action_status": ActionStatus.PENDING if kind == NotificationKind.FOLLOW_REQUEST else None,
        },
    )
    if created:
        logger.info(f"Notification {notification.id} ({kind}) dispatched to user {recipient_id}")
    else:
        logger.info(f"Duplicate {kind} notification for key {key} ignored")
    return notification


def mark_follow_request_action(follow, status):
    """Record the outcome of a follow request on the notification that announced it."""
    return Notification.objects.filter(
        follow=follow, kind=NotificationKind.FOLLOW_REQUEST
    ).update(action_status=status, action_taken_at=timezone.now())


def withdraw_follow_request(follow):
    """Drop the still-pending request notification once the requester cancels."""
    deleted, _ = Notification.objects.filter(
        follow=follow, kind=NotificationKind.FOLLOW_REQUEST, action_status=ActionStatus.PENDING
    ).delete()
    return deleted


def list_notifications(recipient, unread_only=False):
    """Notifications of ``recipient``, newest first; the list view pages it with a cursor."""
    queryset = Notification.objects.filter(recipient=recipient).select_related("actor__profile")
    if unread_only:
        queryset = queryset.filter(is_read=False)
    return queryset.order_by("-created_at", "-id")


def unread_count(recipient):
    return Notification.objects.filter(recipient=recipient, is_read=False).count()


def mark_read(recipient, ids):
    """Mark the given notifications read; ids belonging to someone else are ignored."""
    return Notification.objects.filter(recipient=recipient, id__in=ids, is_read=False).update(
        is_read=True, read_at=timezone.now()
    )


def mark_all_read(recipient):
    return Notification.objects.filter(recipient=recipient, is_read=False).update(
        is_read=True, read_at=timezone.now()
    )
