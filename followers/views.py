import logging
from rest_framework import generics, status
from rest_framework.exceptions import NotFound
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from backend.exceptions import Forbidden
from visibility.services import NOT_FOUND, check_profile_access
from . import services
from .messages import STANDARD_MESSAGES
from .models import FollowStatus
from .serializers import (
    ConnectionSerializer,
    FollowRequestSerializer,
    FollowResponseSerializer,
    FollowSerializer,
)

logger = logging.getLogger(__name__)


class CustomPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100


class FollowView(APIView):
    """Follow a user; private targets receive a pending request instead."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = FollowRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        follow = services.request_follow(
            request.user,
            serializer.validated_data['followed'],
            serializer.validated_data.get('message'),
        )
        key = "FOLLOW_SUCCESS" if follow.status == FollowStatus.ACCEPTED else "FOLLOW_REQUESTED"
        return Response({
            "data": FollowSerializer(follow).data,
            **STANDARD_MESSAGES[key],
        }, status=status.HTTP_201_CREATED)


class UnfollowView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, user_id):
        removed = services.unfollow(request.user, user_id)
        key = "UNFOLLOW_SUCCESS" if removed else "NOT_FOLLOWING"
        return Response({"data": {"removed": removed}, **STANDARD_MESSAGES[key]}, status=status.HTTP_200_OK)


class RemoveFollowerView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, user_id):
        removed = services.remove_follower(request.user, user_id)
        key = "FOLLOWER_REMOVED" if removed else "NOT_A_FOLLOWER"
        return Response({"data": {"removed": removed}, **STANDARD_MESSAGES[key]}, status=status.HTTP_200_OK)


class PendingRequestListView(generics.ListAPIView):
    """Incoming follow requests awaiting the current user's decision."""
    serializer_class = FollowSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = CustomPagination

    def get_queryset(self):
        return services.pending_requests_for(self.request.user)


class RespondFollowRequestView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        serializer = FollowResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        follow = services.respond_follow(pk, request.user, serializer.validated_data['decision'])
        key = "REQUEST_ACCEPTED" if follow.status == FollowStatus.ACCEPTED else "REQUEST_REJECTED"
        return Response({
            "data": {"id": follow.pk, "state": follow.status},
            **STANDARD_MESSAGES[key],
        }, status=status.HTTP_200_OK)


class ConnectionListView(generics.ListAPIView):
    """Followers or followings of a user, visible to whoever may see the profile."""
    serializer_class = ConnectionSerializer
    permission_classes = [AllowAny]
    pagination_class = CustomPagination
    direction = "followers"

    def get_queryset(self):
        user_id = self.kwargs['user_id']
        decision = check_profile_access(self.request.user, user_id)
        if decision.reason == NOT_FOUND:
            raise NotFound("Profile not found.")
        if not decision.can_view:
            raise Forbidden(STANDARD_MESSAGES["PROFILE_RESTRICTED"]["message"])
        if self.direction == "followers":
            return services.followers_of(user_id)
        return services.following_of(user_id)

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["direction"] = self.direction
        return context
