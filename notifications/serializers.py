from rest_framework import serializers
from .models import Notification, NotificationPreference


class NotificationSerializer(serializers.ModelSerializer):
    """Serializer for Notification model."""
    actor_name = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            "id",
            "kind",
            "actor",
            "actor_name",
            "post",
            "follow",
            "comment",
            "title",
            "message",
            "is_read",
            "read_at",
            "action_status",
            "action_taken_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_actor_name(self, obj):
        profile = getattr(obj.actor, "profile", None) if obj.actor_id else None
        return profile.profile_name if profile else None


class MarkReadSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False, max_length=500)


class NotificationPreferenceSerializer(serializers.ModelSerializer):
    class Meta:
        model = NotificationPreference
        fields = [
            "follow_requests_enabled",
            "follow_accepted_enabled",
            "new_followers_enabled",
            "likes_enabled",
            "comments_enabled",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]
