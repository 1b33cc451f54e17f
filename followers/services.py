"""Follow edge state machine.

    absent  --request (public target)-->   accepted
    absent  --request (private target)-->  pending
    pending --accept (target only)-->      accepted
    pending --reject (target only)-->      absent   (reported as "rejected", row deleted)
    pending --unfollow (source)-->         absent   (request withdrawn)
    accepted --unfollow / remove-->        absent

Rejected requests are deleted rather than kept, so the requester may ask again
right away. Every transition runs in one transaction together with the
follower counters and the notification it dispatches.
"""
import logging
from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q
from django.db.models.functions import Greatest
from rest_framework.exceptions import NotFound, ValidationError
from backend.exceptions import AlreadyExists, Forbidden, InvalidSelfFollow, InvalidState
from notifications.dispatcher import dispatch, mark_follow_request_action, withdraw_follow_request
from notifications.models import ActionStatus, NotificationKind
from profiles.models import Profile
from .models import Follow, FollowStatus

logger = logging.getLogger(__name__)

ACCEPT = "accept"
REJECT = "reject"
DECISIONS = {ACCEPT: ACCEPT, "approve": ACCEPT, REJECT: REJECT, "decline": REJECT}


def _as_id(value, field):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError({field: "A valid user id is required."})


def _adjust_counts(follower_id, followed_id, delta):
    Profile.objects.filter(user_id=followed_id).update(
        follower_count=Greatest(F("follower_count") + delta, 0)
    )
    Profile.objects.filter(user_id=follower_id).update(
        following_count=Greatest(F("following_count") + delta, 0)
    )


def request_follow(source, target_id, message=None):
    """Create a follow edge from ``source`` to ``target_id``.

    Public targets are followed immediately, private ones get a pending request.
    """
    target_id = _as_id(target_id, "followed")
    if source.pk == target_id:
        raise InvalidSelfFollow()

    try:
        target_profile = Profile.objects.only("user_id", "visibility").get(user_id=target_id)
    except Profile.DoesNotExist:
        raise NotFound("The user you're trying to follow doesn't exist.")

    status = FollowStatus.PENDING if target_profile.is_private else FollowStatus.ACCEPTED

    with transaction.atomic():
        if Follow.objects.filter(follower=source, followed_id=target_id).exists():
            raise AlreadyExists()
        try:
            with transaction.atomic():
                follow = Follow.objects.create(
                    follower=source, followed_id=target_id, status=status, message=message or ""
                )
        except IntegrityError:
            # A concurrent request for the same pair committed first.
            raise AlreadyExists()

        if follow.is_accepted:
            _adjust_counts(source.pk, target_id, 1)
            dispatch(target_id, source.pk, NotificationKind.NEW_FOLLOWER, follow=follow)
        else:
            dispatch(target_id, source.pk, NotificationKind.FOLLOW_REQUEST, follow=follow, message=follow.message)

    logger.info(f"User {source.pk} -> {target_id}: follow {follow.status}")
    return follow


def respond_follow(edge_id, acting_user, decision):
    """Accept or reject a pending request; only its target may respond."""
    action = DECISIONS.get(str(decision).lower())
    if action is None:
        raise ValidationError({"decision": "Decision must be 'accept' or 'reject'."})

    with transaction.atomic():
        try:
            follow = Follow.objects.select_for_update().get(pk=edge_id)
        except Follow.DoesNotExist:
            raise NotFound("Follow request not found.")
        if follow.followed_id != acting_user.pk:
            raise Forbidden("Only the requested user can respond to this follow request.")
        if follow.status != FollowStatus.PENDING:
            raise InvalidState()

        if action == ACCEPT:
            follow.status = FollowStatus.ACCEPTED
            follow.save(update_fields=["status", "updated_at"])
            _adjust_counts(follow.follower_id, follow.followed_id, 1)
            mark_follow_request_action(follow, ActionStatus.ACCEPTED)
            dispatch(follow.follower_id, follow.followed_id, NotificationKind.FOLLOW_ACCEPTED, follow=follow)
        else:
            mark_follow_request_action(follow, ActionStatus.DECLINED)
            edge_id = follow.pk
            follow.delete()
            follow.pk = edge_id
            follow.status = FollowStatus.REJECTED

    logger.info(f"Follow request {follow.pk} {follow.status} by user {acting_user.pk}")
    return follow


def _delete_edge(follow):
    if follow.status == FollowStatus.PENDING:
        withdraw_follow_request(follow)
    was_accepted = follow.is_accepted
    follow.delete()
    if was_accepted:
        _adjust_counts(follow.follower_id, follow.followed_id, -1)


def unfollow(source, target_id):
    """Remove the edge from ``source`` to ``target_id``; absent edges are a successful no-op."""
    target_id = _as_id(target_id, "followed")
    with transaction.atomic():
        follow = Follow.objects.select_for_update().filter(follower=source, followed_id=target_id).first()
        if follow is None:
            logger.debug(f"Unfollow {source.pk} -> {target_id}: no edge")
            return False
        _delete_edge(follow)
    logger.info(f"User {source.pk} unfollowed {target_id}")
    return True


def remove_follower(target, follower_id):
    """Let ``target`` drop an accepted follower."""
    follower_id = _as_id(follower_id, "follower")
    with transaction.atomic():
        follow = Follow.objects.select_for_update().filter(
            follower_id=follower_id, followed=target, status=FollowStatus.ACCEPTED
        ).first()
        if follow is None:
            return False
        _delete_edge(follow)
    logger.info(f"User {target.pk} removed follower {follower_id}")
    return True


def followers_of(user_id):
    return Follow.objects.filter(followed_id=user_id, status=FollowStatus.ACCEPTED).select_related(
        "follower__profile"
    ).order_by("-created_at")


def following_of(user_id):
    return Follow.objects.filter(follower_id=user_id, status=FollowStatus.ACCEPTED).select_related(
        "followed__profile"
    ).order_by("-created_at")


def pending_requests_for(user):
    return Follow.objects.filter(followed=user, status=FollowStatus.PENDING).select_related(
        "follower__profile", "followed__profile"
    ).order_by("-created_at")


def reconcile_follow_counts(user_ids=None) -> int:
    """Recompute follower/following counters from accepted edges.

    Returns the number of profiles whose stored counters had drifted.
    """
    accepted = FollowStatus.ACCEPTED
    profiles = Profile.objects.annotate(
        true_followers=Count(
            "user__followers", filter=Q(user__followers__status=accepted), distinct=True
        ),
        true_following=Count(
            "user__following", filter=Q(user__following__status=accepted), distinct=True
        ),
    )
    if user_ids is not None:
        profiles = profiles.filter(user_id__in=user_ids)

    repaired = 0
    for profile in profiles.only("id", "user_id", "follower_count", "following_count"):
        if profile.follower_count == profile.true_followers and profile.following_count == profile.true_following:
            continue
        logger.warning(
            f"Follow counters drifted for user {profile.user_id}: "
            f"followers {profile.follower_count}->{profile.true_followers}, "
            f"following {profile.following_count}->{profile.true_following}"
        )
        Profile.objects.filter(pk=profile.pk).update(
            follower_count=profile.true_followers, following_count=profile.true_following
        )
        repaired += 1
    return repaired
