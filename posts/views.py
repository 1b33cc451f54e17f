import logging
from rest_framework import generics, status
from rest_framework.pagination import CursorPagination
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from backend.permissions import IsOwnerOrReadOnly
from visibility.services import filter_visible, get_visible_post_or_404
from .messages import STANDARD_MESSAGES
from .models import Post
from .serializers import PostSerializer

logger = logging.getLogger(__name__)


class PostCursorPagination(CursorPagination):
    """Cursor pages carry no total count, so hidden posts are never hinted at."""
    page_size = 10
    page_size_query_param = 'page_size'
    max_page_size = 100
    ordering = ('-created_at', '-id')


class PostList(generics.ListCreateAPIView):
    """Feed of posts the viewer may see; ``?author=<id>`` narrows to one timeline."""
    serializer_class = PostSerializer
    pagination_class = PostCursorPagination
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["author"]
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get_queryset(self):
        return Post.objects.select_related("author__profile")

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        # Visibility is applied per page; a page may hold fewer than page_size posts.
        visible = filter_visible(request.user, page)
        serializer = self.get_serializer(visible, many=True)
        response = self.get_paginated_response(serializer.data)
        response.data.update(STANDARD_MESSAGES["POSTS_RETRIEVED_SUCCESS"])
        return response

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        post = serializer.save(author=request.user)
        logger.info(f"User {request.user.pk} created post {post.pk} ({post.visibility})")
        return Response({
            "data": serializer.data,
            **STANDARD_MESSAGES["POST_CREATED_SUCCESS"],
        }, status=status.HTTP_201_CREATED)


class PostDetail(generics.RetrieveUpdateDestroyAPIView):
    """Retrieve a visible post; its author may update or delete it."""
    serializer_class = PostSerializer
    permission_classes = [IsAuthenticatedOrReadOnly, IsOwnerOrReadOnly]

    def get_object(self):
        post = get_visible_post_or_404(self.request.user, self.kwargs["pk"])
        self.check_object_permissions(self.request, post)
        return post

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return Response({
            "data": serializer.data,
            **STANDARD_MESSAGES["POST_RETRIEVED_SUCCESS"],
        })

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return Response({
            "data": serializer.data,
            **STANDARD_MESSAGES["POST_UPDATED_SUCCESS"],
        })

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        post_id = instance.pk
        self.perform_destroy(instance)
        logger.info(f"User {request.user.pk} deleted post {post_id}")
        return Response(STANDARD_MESSAGES["POST_DELETED_SUCCESS"], status=status.HTTP_204_NO_CONTENT)
