import logging
from rest_framework import generics, status
from rest_framework.pagination import CursorPagination
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from backend.permissions import IsOwnerOrAdmin
from . import dispatcher
from .models import Notification
from .serializers import MarkReadSerializer, NotificationPreferenceSerializer, NotificationSerializer

logger = logging.getLogger(__name__)

class NotificationCursorPagination(CursorPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100
    ordering = ('-created_at', '-id')

    def get_paginated_response(self, data):
        return Response({
            'next': self.get_next_link(),
            'previous': self.get_previous_link(),
            'results': data,
            'unread_count': dispatcher.unread_count(self.recipient),
        })


class NotificationListView(generics.ListAPIView):
    """Newest-first notifications of the current user; ``?unread_only=true`` narrows to unread."""
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = NotificationCursorPagination

    def get_queryset(self):
        unread_only = self.request.query_params.get('unread_only', '').lower() in ('1', 'true', 'yes')
        return dispatcher.list_notifications(self.request.user, unread_only=unread_only)

    def paginate_queryset(self, queryset):
        self.paginator.recipient = self.request.user
        return super().paginate_queryset(queryset)


class MarkNotificationsAsReadView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = MarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        updated = dispatcher.mark_read(request.user, serializer.validated_data['ids'])
        logger.info(f"{updated} notifications marked as read for user {request.user.id}")
        return Response({
            "data": {"updated_count": updated},
            "message": "Notifications marked as read",
            "type": "success",
        }, status=status.HTTP_200_OK)


class BulkMarkNotificationsAsReadView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, *args, **kwargs):
        updated = dispatcher.mark_all_read(request.user)
        logger.info(f"All notifications for user {request.user.id} marked as read.")
        return Response({
            "data": {"updated_count": updated},
            "message": "All notifications marked as read",
            "type": "success",
        }, status=status.HTTP_200_OK)


class DeleteNotificationView(generics.DestroyAPIView):
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated, IsOwnerOrAdmin]

    def get_queryset(self):
        # Other users' notifications are reported as missing
        return Notification.objects.filter(recipient=self.request.user)

    def destroy(self, request, *args, **kwargs):
        notification = self.get_object()
        notification.delete()
        return Response({"message": "Notification deleted", "type": "success"}, status=status.HTTP_200_OK)


class UnreadCountView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"data": {"unread_count": dispatcher.unread_count(request.user)}, "type": "success"})


class NotificationPreferenceView(generics.RetrieveUpdateAPIView):
    serializer_class = NotificationPreferenceSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "patch", "head", "options"]

    def get_object(self):
        return dispatcher.get_preferences(self.request.user.pk)

    def update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        response = super().update(request, *args, **kwargs)
        logger.info(f"Notification preferences updated for user {request.user.id}")
        return Response({"data": response.data, "message": "Preferences updated", "type": "success"})
