import logging
from collections import namedtuple
from django.db import DatabaseError
from rest_framework.exceptions import NotFound
from followers.models import Follow
from profiles.models import OrganizationMembership, Profile, Visibility
from .policy import resolve_access

logger = logging.getLogger(__name__)

AccessDecision = namedtuple("AccessDecision", ["can_view", "limited_access", "reason"])

NOT_FOUND = "not_found"
NOT_CONNECTED = "not_connected"


def viewer_id_for(viewer):
    """Accept a user, an anonymous user, a raw id or ``None``."""
    if viewer is None:
        return None
    if hasattr(viewer, "is_authenticated"):
        return viewer.pk if viewer.is_authenticated else None
    return viewer


def _owner_visibility(owner_ids):
    return dict(
        Profile.objects.filter(user_id__in=owner_ids).values_list("user_id", "visibility")
    )


def _edge_states(viewer_id, owner_ids):
    return dict(
        Follow.objects.filter(follower_id=viewer_id, followed_id__in=owner_ids)
        .values_list("followed_id", "status")
    )


def _shared_organization_owners(viewer_id, owner_ids):
    viewer_keys = OrganizationMembership.objects.filter(user_id=viewer_id).values("key")
    return set(
        OrganizationMembership.objects.filter(user_id__in=owner_ids, key__in=viewer_keys)
        .values_list("user_id", flat=True)
        .distinct()
    )


def resolve_reasons(viewer, items):
    """Map each item's index to the rule granting access (``None`` for deny).

    ``items`` is any sequence of objects exposing ``author_id`` and ``visibility``.
    Lookups are batched: profile visibility, follow edges and organization
    overlap cost one query each however many items or owners are involved.
    """
    viewer_id = viewer_id_for(viewer)
    owner_ids = {item.author_id for item in items} - {viewer_id}
    if not owner_ids:
        return [resolve_access(viewer_id, item.author_id, item.visibility, Visibility.PUBLIC) for item in items]

    owner_visibility = _owner_visibility(owner_ids)

    def owner_mode(owner_id):
        # A missing profile is treated as private.
        return owner_visibility.get(owner_id, Visibility.PRIVATE)

    undecided = {
        item.author_id for item in items
        if item.author_id in owner_ids
        and resolve_access(viewer_id, item.author_id, item.visibility, owner_mode(item.author_id)) is None
    }

    edges, shared = {}, set()
    if viewer_id is not None and undecided:
        edges = _edge_states(viewer_id, undecided)
        shared = _shared_organization_owners(viewer_id, undecided)

    return [
        resolve_access(
            viewer_id,
            item.author_id,
            item.visibility,
            owner_mode(item.author_id),
            edges.get(item.author_id),
            item.author_id in shared,
        )
        for item in items
    ]


def filter_visible(viewer, items):
    """Return the visible subset of ``items`` in their original order.

    Fails closed: when the relationship or organization lookups error out,
    nothing is visible.
    """
    items = list(items)
    if not items:
        return []
    try:
        reasons = resolve_reasons(viewer, items)
    except DatabaseError as exc:
        logger.warning(f"Visibility lookup failed for viewer {viewer_id_for(viewer)}, denying {len(items)} items: {exc}")
        return []
    return [item for item, reason in zip(items, reasons) if reason is not None]


def can_view_post(viewer, post_id) -> bool:
    from posts.models import Post

    try:
        post = Post.objects.only("id", "author_id", "visibility").get(pk=post_id)
    except Post.DoesNotExist:
        return False
    except DatabaseError as exc:
        logger.warning(f"Content lookup failed for post {post_id}: {exc}")
        return False
    return bool(filter_visible(viewer, [post]))


def get_visible_post_or_404(viewer, post_id, queryset=None):
    """Fetch a post the viewer may see; missing and denied both surface as 404."""
    from posts.models import Post

    queryset = queryset if queryset is not None else Post.objects.select_related("author__profile")
    post = queryset.filter(pk=post_id).first()
    if post is None or not filter_visible(viewer, [post]):
        raise NotFound("Post not found.")
    return post


def check_profile_access(viewer, owner_id) -> AccessDecision:
    """Decide whether ``viewer`` sees the full profile page of ``owner_id``."""
    viewer_id = viewer_id_for(viewer)
    try:
        profile = Profile.objects.only("user_id", "visibility").get(user_id=owner_id)
        if viewer_id is None or viewer_id == owner_id:
            edge_status, shares = None, False
        else:
            edge_status = _edge_states(viewer_id, [owner_id]).get(owner_id)
            shares = owner_id in _shared_organization_owners(viewer_id, [owner_id])
    except Profile.DoesNotExist:
        return AccessDecision(False, True, NOT_FOUND)
    except DatabaseError as exc:
        logger.warning(f"Profile access lookup failed for viewer {viewer_id} on {owner_id}: {exc}")
        return AccessDecision(False, True, NOT_CONNECTED)

    reason = resolve_access(viewer_id, owner_id, Visibility.PUBLIC, profile.visibility, edge_status, shares)
    if reason is None:
        return AccessDecision(False, True, NOT_CONNECTED)
    return AccessDecision(True, False, reason)
