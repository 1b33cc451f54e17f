from rest_framework.response import Response
from django.utils.translation import gettext_lazy as _

# Define message types
MESSAGE_TYPES = {
    'SUCCESS': 'success',
    'ERROR': 'error',
    'WARNING': 'warning',
    'INFO': 'info',
}

# Define standard messages for profile operations
STANDARD_MESSAGES = {
    'PROFILE_RETRIEVED_SUCCESS': {
        'type': MESSAGE_TYPES['SUCCESS'],
        'message': _("Profile retrieved successfully."),
    },
    'PROFILE_UPDATED_SUCCESS': {
        'type': MESSAGE_TYPES['SUCCESS'],
        'message': _("Profile updated successfully."),
    },
    'PROFILE_PRIVATE_INFO': {
        'type': MESSAGE_TYPES['INFO'],
        'message': _("This profile is private. Follow the user or share an organization to see more."),
    },
}

def profile_success_response(message_key: str, data: dict = None):
    """Wrap ``data`` in the standard envelope for ``message_key``."""
    message = STANDARD_MESSAGES.get(message_key, {})
    response_data = {
        'message': message.get('message', 'Action completed successfully.'),
        'type': message.get('type', 'success')
    }
    if data is not None:
        response_data['data'] = data
    return Response(response_data)
