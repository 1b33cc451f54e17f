from rest_framework import serializers
from .models import Follow


class FollowSerializer(serializers.ModelSerializer):
    follower_name = serializers.CharField(source='follower.profile.profile_name', read_only=True)
    followed_name = serializers.CharField(source='followed.profile.profile_name', read_only=True)

    class Meta:
        model = Follow
        fields = ['id', 'follower', 'follower_name', 'followed', 'followed_name', 'status', 'message', 'created_at']
        read_only_fields = fields


class FollowRequestSerializer(serializers.Serializer):
    followed = serializers.IntegerField()
    message = serializers.CharField(max_length=280, required=False, allow_blank=True, default="")


class FollowResponseSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(choices=['accept', 'reject'])


class ConnectionSerializer(serializers.ModelSerializer):
    """One row of a followers/following list; `direction` in the context picks the other end."""
    user_id = serializers.SerializerMethodField()
    profile_name = serializers.SerializerMethodField()
    followed_since = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Follow
        fields = ['user_id', 'profile_name', 'followed_since']

    def _other(self, obj):
        return obj.follower if self.context.get('direction') == 'followers' else obj.followed

    def get_user_id(self, obj):
        return self._other(obj).pk

    def get_profile_name(self, obj):
        return self._other(obj).profile.profile_name
