from django.conf import settings
from django.db import models


class EngagementMembership(models.Model):
    """One user's like or save on one post; at most one row per (post, user)."""

    post = models.ForeignKey("posts.Post", on_delete=models.CASCADE, related_name="%(class)ss")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="%(class)ss")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.user_id} {self._meta.model_name}s post {self.post_id}"


class Like(EngagementMembership):
    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["post", "user"], name="unique_like_per_user"),
        ]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="like_user_created_idx"),
        ]


class Save(EngagementMembership):
    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["post", "user"], name="unique_save_per_user"),
        ]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="save_user_created_idx"),
        ]
