import logging
from collections import namedtuple
from django.db import IntegrityError, transaction
from django.db.models import Count, F, IntegerField, OuterRef, Subquery
from django.db.models.functions import Coalesce, Greatest
from rest_framework.exceptions import NotFound, ValidationError
from notifications.dispatcher import dispatch
from notifications.models import NotificationKind
from posts.models import Post
from visibility.services import get_visible_post_or_404
from .models import Like, Save

logger = logging.getLogger(__name__)

ToggleResult = namedtuple("ToggleResult", ["active", "count"])

LIKE = "like"
SAVE = "save"
KINDS = {
    LIKE: (Like, "likes_count"),
    SAVE: (Save, "saves_count"),
}


def _remove_membership(model, post_id, user_id):
    deleted, _ = model.objects.filter(post_id=post_id, user_id=user_id).delete()
    return deleted


def toggle_engagement(kind, post_id, actor) -> ToggleResult:
    """Flip ``actor``'s like or save on a post and return the new state with the fresh count.

    The membership row and the counter change commit together under a lock on
    the post row. Adding a membership that a concurrent request already added
    is treated as a no-op add: the counter is not bumped twice.
    """
    try:
        model, counter = KINDS[kind]
    except KeyError:
        raise ValidationError({"kind": f"Unsupported engagement kind '{kind}'."})

    post = get_visible_post_or_404(actor, post_id, queryset=Post.objects.only("id", "author", "visibility"))
    counter_row = Post.objects.filter(pk=post.pk)

    with transaction.atomic():
        # Row lock serializes toggles on the post and keeps it from being deleted mid-toggle.
        if counter_row.select_for_update().values_list("pk", flat=True).first() is None:
            raise NotFound("Post not found.")
        if _remove_membership(model, post.pk, actor.pk):
            counter_row.update(**{counter: Greatest(F(counter) - 1, 0)})
            active = False
        else:
            active = True
            try:
                with transaction.atomic():
                    model.objects.create(post_id=post.pk, user_id=actor.pk)
            except IntegrityError:
                logger.info(f"Concurrent {kind} by user {actor.pk} on post {post.pk} already recorded")
            else:
                counter_row.update(**{counter: F(counter) + 1})
                if kind == LIKE:
                    dispatch(post.author_id, actor.pk, NotificationKind.LIKE, post=post)
        count = counter_row.values_list(counter, flat=True).get()

    logger.debug(f"User {actor.pk} {kind} on post {post.pk}: active={active} count={count}")
    return ToggleResult(active, count)


def saved_posts_for(user):
    """Posts ``user`` saved, newest save first; callers still filter for visibility."""
    return (
        Post.objects.filter(saves__user=user)
        .annotate(saved_at=F("saves__created_at"))
        .select_related("author__profile")
        .order_by("-saved_at", "-id")
    )


def _count_of(model):
    counts = (
        model.objects.filter(post=OuterRef("pk"))
        .order_by()
        .values("post")
        .annotate(total=Count("pk"))
        .values("total")
    )
    return Coalesce(Subquery(counts, output_field=IntegerField()), 0)


def reconcile_counters(post_ids=None) -> int:
    """Recompute likes, saves and comments counters from their tables.

    Returns the number of posts whose stored counters had drifted.
    """
    from comments.models import Comment

    posts = Post.objects.annotate(
        true_likes=_count_of(Like),
        true_saves=_count_of(Save),
        true_comments=_count_of(Comment),
    ).only("id", "likes_count", "saves_count", "comments_count")
    if post_ids is not None:
        posts = posts.filter(pk__in=post_ids)

    repaired = 0
    for post in posts.iterator():
        stored = (post.likes_count, post.saves_count, post.comments_count)
        actual = (post.true_likes, post.true_saves, post.true_comments)
        if stored == actual:
            continue
        logger.warning(f"Counters drifted on post {post.pk}: stored={stored} actual={actual}")
        Post.objects.filter(pk=post.pk).update(
            likes_count=post.true_likes, saves_count=post.true_saves, comments_count=post.true_comments
        )
        repaired += 1
    return repaired
