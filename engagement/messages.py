from django.utils.translation import gettext_lazy as _

MESSAGE_TYPES = {
    'SUCCESS': 'success',
    'ERROR': 'error',
    'INFO': 'info',
}

STANDARD_MESSAGES = {
    'LIKE_ADDED': {
        'type': MESSAGE_TYPES['SUCCESS'],
        'message': _("Post liked."),
    },
    'LIKE_REMOVED': {
        'type': MESSAGE_TYPES['SUCCESS'],
        'message': _("Like removed."),
    },
    'SAVE_ADDED': {
        'type': MESSAGE_TYPES['SUCCESS'],
        'message': _("Post saved."),
    },
    'SAVE_REMOVED': {
        'type': MESSAGE_TYPES['SUCCESS'],
        'message': _("Post removed from your saved list."),
    },
    'SAVED_RETRIEVED': {
        'type': MESSAGE_TYPES['INFO'],
        'message': _("Saved posts retrieved successfully."),
    },
}
