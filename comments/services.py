import logging
from django.db import transaction
from django.db.models import F
from django.db.models.functions import Greatest
from django.utils.text import Truncator
from rest_framework.exceptions import ValidationError
from backend.exceptions import Forbidden
from notifications.dispatcher import dispatch
from notifications.models import NotificationKind
from posts.models import Post
from .models import Comment

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


def create_comment(post, author, content):
    """Add a comment to a post the author can already see.

    Callers resolve ``post`` through the visibility layer first.
    """
    content = (content or "").strip()
    if not content:
        raise ValidationError({"content": "Comment cannot be empty."})

    with transaction.atomic():
        comment = Comment.objects.create(post=post, author=author, content=content)
        Post.objects.filter(pk=post.pk).update(comments_count=F("comments_count") + 1)
        dispatch(
            post.author_id, author.pk, NotificationKind.COMMENT, post=post, comment=comment,
            message=Truncator(content).chars(PREVIEW_LENGTH),
        )

    logger.info(f"User {author.pk} commented on post {post.pk}")
    return comment


def delete_comment(comment, acting_user):
    """Remove a comment; allowed for its author and for the post's owner."""
    if acting_user.pk not in (comment.author_id, comment.post.author_id) and not acting_user.is_staff:
        raise Forbidden("You can only delete your own comments or comments on your posts.")

    with transaction.atomic():
        post_id = comment.post_id
        comment.delete()
        Post.objects.filter(pk=post_id).update(comments_count=Greatest(F("comments_count") - 1, 0))

    logger.info(f"User {acting_user.pk} deleted a comment on post {post_id}")
