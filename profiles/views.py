import logging
from rest_framework import generics
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from backend.exceptions import Forbidden
from visibility.services import NOT_FOUND, check_profile_access
from .messages import profile_success_response
from .models import Profile
from .serializers import LimitedProfileSerializer, ProfileSerializer

logger = logging.getLogger(__name__)


class ProfileDetailView(generics.RetrieveUpdateAPIView):
    """Retrieve a profile (limited when the viewer has no access) or update your own."""
    queryset = Profile.objects.select_related('user')
    serializer_class = ProfileSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    lookup_field = "user__id"
    lookup_url_kwarg = "user_id"
    http_method_names = ["get", "patch", "head", "options"]

    def retrieve(self, request, *args, **kwargs):
        decision = check_profile_access(request.user, self.kwargs["user_id"])
        if decision.reason == NOT_FOUND:
            raise NotFound("Profile not found.")
        instance = self.get_object()
        serializer_class = ProfileSerializer if decision.can_view else LimitedProfileSerializer
        data = dict(serializer_class(instance).data)
        data.update({"limited_access": decision.limited_access, "access_reason": decision.reason})
        message_key = 'PROFILE_RETRIEVED_SUCCESS' if decision.can_view else 'PROFILE_PRIVATE_INFO'
        return profile_success_response(message_key, data)

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        if instance.user_id != request.user.pk:
            raise Forbidden("You are not authorized to update this profile.")
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Profile of user {instance.user_id} updated: {sorted(serializer.validated_data)}")
        return profile_success_response('PROFILE_UPDATED_SUCCESS', serializer.data)
