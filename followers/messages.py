from django.utils.translation import gettext_lazy as _

MESSAGE_TYPES = {
    "SUCCESS": "success",
    "ERROR": "error",
    "INFO": "info",
}

STANDARD_MESSAGES = {
    "FOLLOW_SUCCESS": {
        "type": MESSAGE_TYPES["SUCCESS"],
        "message": _("You are now following this user."),
    },
    "FOLLOW_REQUESTED": {
        "type": MESSAGE_TYPES["SUCCESS"],
        "message": _("Follow request sent."),
    },
    "UNFOLLOW_SUCCESS": {
        "type": MESSAGE_TYPES["SUCCESS"],
        "message": _("You have successfully unfollowed the user."),
    },
    "NOT_FOLLOWING": {
        "type": MESSAGE_TYPES["INFO"],
        "message": _("You are not following this user."),
    },
    "REQUEST_ACCEPTED": {
        "type": MESSAGE_TYPES["SUCCESS"],
        "message": _("Follow request accepted."),
    },
    "REQUEST_REJECTED": {
        "type": MESSAGE_TYPES["SUCCESS"],
        "message": _("Follow request rejected."),
    },
    "FOLLOWER_REMOVED": {
        "type": MESSAGE_TYPES["SUCCESS"],
        "message": _("Follower removed."),
    },
    "NOT_A_FOLLOWER": {
        "type": MESSAGE_TYPES["INFO"],
        "message": _("This user is not following you."),
    },
    "PROFILE_RESTRICTED": {
        "type": MESSAGE_TYPES["ERROR"],
        "message": _("This profile is private."),
    },
}
