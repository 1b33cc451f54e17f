from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    profile_name = serializers.CharField(read_only=True)
    visibility = serializers.CharField(source="profile.visibility", read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "profile_name", "visibility", "is_staff"]
        read_only_fields = ["id", "email", "is_staff"]
