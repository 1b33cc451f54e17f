from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from posts.serializers import PostSerializer
from posts.views import PostCursorPagination
from visibility.services import filter_visible
from .messages import STANDARD_MESSAGES
from .serializers import ToggleResultSerializer
from .services import saved_posts_for, toggle_engagement


class ToggleEngagementView(APIView):
    """POST flips the current user's like or save on a post."""
    permission_classes = [IsAuthenticated]
    kind = None

    def post(self, request, pk):
        result = toggle_engagement(self.kind, pk, request.user)
        key = f"{self.kind.upper()}_{'ADDED' if result.active else 'REMOVED'}"
        return Response({
            "data": ToggleResultSerializer(result._asdict()).data,
            **STANDARD_MESSAGES[key],
        }, status=status.HTTP_200_OK)


class SavedPostPagination(PostCursorPagination):
    ordering = ('-saved_at', '-id')


class SavedPostList(generics.ListAPIView):
    """The current user's saved posts that are still visible to them."""
    serializer_class = PostSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = SavedPostPagination

    def get_queryset(self):
        return saved_posts_for(self.request.user)

    def list(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        serializer = self.get_serializer(filter_visible(request.user, page), many=True)
        response = self.get_paginated_response(serializer.data)
        response.data.update(STANDARD_MESSAGES['SAVED_RETRIEVED'])
        return response
