from rest_framework import serializers


class ToggleResultSerializer(serializers.Serializer):
    active = serializers.BooleanField()
    count = serializers.IntegerField()
