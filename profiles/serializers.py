from django.db import transaction
from rest_framework import serializers
from .models import Profile


class ProfileSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    profile_name = serializers.CharField(read_only=True)
    organizations = serializers.ListField(
        child=serializers.CharField(max_length=120), required=False, write_only=True
    )
    organization_keys = serializers.SerializerMethodField()

    class Meta:
        model = Profile
        fields = [
            "user_id",
            "profile_name",
            "bio",
            "visibility",
            "organizations",
            "organization_keys",
            "follower_count",
            "following_count",
        ]
        read_only_fields = [
            "follower_count",
            "following_count",
            "profile_name",
        ]

    def get_organization_keys(self, obj):
        return sorted(obj.organization_keys)

    def update(self, instance, validated_data):
        organizations = validated_data.pop("organizations", None)
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if organizations is not None:
                instance.set_organizations(organizations)
        return instance


class LimitedProfileSerializer(serializers.ModelSerializer):
    """What anyone may see of a profile they have no access to."""
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Profile
        fields = ["user_id", "profile_name", "visibility"]
        read_only_fields = fields
