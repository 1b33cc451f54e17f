from django.conf import settings
from django.db import models
from django.utils import timezone


class NotificationKind(models.TextChoices):
    FOLLOW_REQUEST = "follow_request", "Follow request"
    FOLLOW_ACCEPTED = "follow_accepted", "Follow accepted"
    NEW_FOLLOWER = "new_follower", "New follower"
    LIKE = "like", "Like"
    COMMENT = "comment", "Comment"


class ActionStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACCEPTED = "accepted", "Accepted"
    DECLINED = "declined", "Declined"


class Notification(models.Model):
    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications_sent", null=True, blank=True
    )
    kind = models.CharField(max_length=30)
    post = models.ForeignKey("posts.Post", on_delete=models.CASCADE, related_name="notifications", null=True, blank=True)
    follow = models.ForeignKey(
        "followers.Follow", on_delete=models.SET_NULL, related_name="notifications", null=True, blank=True
    )
    comment = models.ForeignKey(
        "comments.Comment", on_delete=models.CASCADE, related_name="notifications", null=True, blank=True
    )
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True, default="")
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    action_status = models.CharField(max_length=10, choices=ActionStatus.choices, null=True, blank=True)
    action_taken_at = models.DateTimeField(null=True, blank=True)
    idempotency_key = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self):
        return f"Notification for {self.recipient_id} - {self.kind}"

    def mark_as_read(self):
        self.is_read = True
        self.read_at = timezone.now()
        self.save(update_fields=["is_read", "read_at"])

    class Meta:
        indexes = [
            models.Index(fields=['recipient', '-created_at'], name='notif_recipient_created_idx'),
            models.Index(fields=['recipient', 'is_read'], name='notif_recipient_read_idx'),
            models.Index(fields=['recipient', 'kind', '-created_at'], name='notif_recipient_kind_idx'),
        ]
        ordering = ['-created_at', '-id']


class NotificationPreference(models.Model):
    """Per-recipient switches; a disabled kind is never written at all."""

    KIND_FIELDS = {
        NotificationKind.FOLLOW_REQUEST: "follow_requests_enabled",
        NotificationKind.FOLLOW_ACCEPTED: "follow_accepted_enabled",
        NotificationKind.NEW_FOLLOWER: "new_followers_enabled",
        NotificationKind.LIKE: "likes_enabled",
        NotificationKind.COMMENT: "comments_enabled",
    }

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notification_preferences"
    )
    follow_requests_enabled = models.BooleanField(default=True)
    follow_accepted_enabled = models.BooleanField(default=True)
    new_followers_enabled = models.BooleanField(default=True)
    likes_enabled = models.BooleanField(default=True)
    comments_enabled = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Notification preferences for {self.user_id}"

    def allows(self, kind):
        field = self.KIND_FIELDS.get(kind)
        # Kinds added by the surrounding application have no switch yet.
        return True if field is None else getattr(self, field)
