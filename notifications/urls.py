from django.urls import path
from .views import (
    BulkMarkNotificationsAsReadView,
    DeleteNotificationView,
    MarkNotificationsAsReadView,
    NotificationListView,
    NotificationPreferenceView,
    UnreadCountView,
)

urlpatterns = [
    path("notifications/", NotificationListView.as_view(), name="notification-list"),
    path("notifications/mark-read/", MarkNotificationsAsReadView.as_view(), name="mark-notifications-read"),
    path("notifications/mark-all-read/", BulkMarkNotificationsAsReadView.as_view(), name="mark-all-notifications-read"),
    path("notifications/unread-count/", UnreadCountView.as_view(), name="notification-unread-count"),
    path("notifications/preferences/", NotificationPreferenceView.as_view(), name="notification-preferences"),
    path("notifications/<int:pk>/delete/", DeleteNotificationView.as_view(), name="delete-notification"),
]
