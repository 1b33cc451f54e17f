from django.contrib import admin
from .models import Notification, NotificationPreference

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['recipient', 'kind', 'actor', 'is_read', 'action_status', 'created_at']
    list_filter = ['kind', 'is_read', 'action_status', 'created_at']
    search_fields = ['recipient__email', 'title', 'idempotency_key']
    readonly_fields = ['idempotency_key', 'created_at', 'read_at', 'action_taken_at']
    raw_id_fields = ['recipient', 'actor', 'post', 'follow', 'comment']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('recipient', 'actor')

@admin.register(NotificationPreference)
class NotificationPreferenceAdmin(admin.ModelAdmin):
    list_display = ['user', 'follow_requests_enabled', 'follow_accepted_enabled',
                    'new_followers_enabled', 'likes_enabled', 'comments_enabled']
    raw_id_fields = ['user']
