from django.db import models
from django.conf import settings


class FollowStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACCEPTED = "accepted", "Accepted"
    REJECTED = "rejected", "Rejected"


class Follow(models.Model):
    """A directed follow edge; its status is the single source of truth for "follower connects to followed"."""
    follower = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="following", on_delete=models.CASCADE
    )
    followed = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="followers", on_delete=models.CASCADE
    )
    status = models.CharField(
        max_length=10, choices=FollowStatus.choices, default=FollowStatus.PENDING
    )
    message = models.CharField(max_length=280, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["follower", "followed"], name="unique_follow_edge"),
            models.CheckConstraint(
                condition=~models.Q(follower=models.F("followed")), name="follow_not_self"
            ),
        ]
        indexes = [
            models.Index(fields=["followed", "status"], name="follow_followed_status_idx"),
            models.Index(fields=["follower", "status"], name="follow_follower_status_idx"),
            models.Index(fields=["created_at"], name="follow_created_at_idx"),
        ]

    def __str__(self):
        return f"{self.follower.profile_name} -> {self.followed.profile_name} ({self.status})"

    @property
    def is_accepted(self):
        return self.status == FollowStatus.ACCEPTED
