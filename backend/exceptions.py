import logging
from django.db import OperationalError
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError, PermissionDenied
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidSelfFollow(ValidationError):
    default_detail = _("You cannot follow yourself.")
    default_code = "invalid_self_follow"


class Forbidden(PermissionDenied):
    default_detail = _("You are not allowed to perform this action.")
    default_code = "forbidden"


class AlreadyExists(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _("This relationship already exists.")
    default_code = "already_exists"


class InvalidState(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _("This request is no longer pending.")
    default_code = "invalid_state"


class Unavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = _("The service is temporarily unavailable. Please retry.")
    default_code = "unavailable"


def custom_exception_handler(exc, context):
    if isinstance(exc, OperationalError):
        logger.error(f"Database unavailable while handling {context.get('view')}: {exc}")
        exc = Unavailable()
    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(response.data, list):
            # Non-field validation errors come back as a bare list
            response.data = {'message': response.data[0] if len(response.data) == 1 else response.data}
        if 'detail' in response.data:
            response.data['message'] = response.data.pop('detail')
        response.data['type'] = 'error'
    return response
