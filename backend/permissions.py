from rest_framework import permissions
from django.contrib.auth import get_user_model

User = get_user_model()

class IsOwnerOrAdmin(permissions.BasePermission):
    """
    Custom permission to allow only owners of an object or admin users to access it.
    """

    def has_object_permission(self, request, view, obj):
        if not request.user.is_authenticated:
            return False

        if request.user.is_staff or request.user.is_superuser:
            return True

        if isinstance(obj, User):
            return obj == request.user

        # Notifications belong to their recipient, content to its author
        for attr in ('recipient', 'author', 'user'):
            if hasattr(obj, attr):
                return getattr(obj, attr) == request.user

        return False


class IsOwnerOrReadOnly(permissions.BasePermission):
    """
    Read access for anyone who passed the view's visibility checks, writes for the owner only.
    """

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        owner = getattr(obj, 'author', None) or getattr(obj, 'user', None)
        return bool(request.user and request.user.is_authenticated and owner == request.user)
