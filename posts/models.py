from django.conf import settings
from django.db import models
from profiles.models import Visibility


class Post(models.Model):
    """A piece of content owned by its author.

    ``likes_count``, ``saves_count`` and ``comments_count`` are denormalized
    from the membership tables; ``engagement.services.reconcile_counters``
    repairs them if they ever drift.
    """
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="posts",
        db_index=True
    )
    content = models.TextField()
    visibility = models.CharField(
        max_length=10, choices=Visibility.choices, default=Visibility.PUBLIC
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)
    likes_count = models.PositiveIntegerField(default=0)
    saves_count = models.PositiveIntegerField(default=0)
    comments_count = models.PositiveIntegerField(default=0)

    class Meta:
        indexes = [
            models.Index(fields=['author', '-created_at'], name='post_author_created_idx'),
            models.Index(fields=['visibility', '-created_at'], name='post_visibility_created_idx'),
        ]
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Post {self.pk} by {self.author_id}"
