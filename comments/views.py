from rest_framework import generics, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from django.shortcuts import get_object_or_404
from visibility.services import get_visible_post_or_404
from .models import Comment
from .serializers import CommentSerializer
from .services import create_comment, delete_comment

class CommentPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "page_size"
    max_page_size = 100

class CommentList(generics.ListCreateAPIView):
    """Comments of a post; reading and writing both require seeing the post."""
    serializer_class = CommentSerializer
    pagination_class = CommentPagination

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsAuthenticated()]
        return [AllowAny()]

    def get_post(self):
        return get_visible_post_or_404(self.request.user, self.kwargs["post_id"])

    def get_queryset(self):
        post = self.get_post()
        return Comment.objects.filter(post=post).select_related("author__profile")

    def create(self, request, *args, **kwargs):
        post = self.get_post()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = create_comment(post, request.user, serializer.validated_data["content"])
        return Response({
            "data": self.get_serializer(comment).data,
            "message": "Comment added successfully.",
            "type": "success",
        }, status=status.HTTP_201_CREATED)

class CommentDetail(generics.DestroyAPIView):
    queryset = Comment.objects.select_related("post")
    serializer_class = CommentSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        comment = get_object_or_404(self.get_queryset(), pk=self.kwargs["pk"])
        # A comment on a post the user cannot see is reported as missing.
        get_visible_post_or_404(self.request.user, comment.post_id)
        return comment

    def destroy(self, request, *args, **kwargs):
        delete_comment(self.get_object(), request.user)
        return Response({
            "message": "Comment deleted successfully.",
            "type": "success",
        }, status=status.HTTP_200_OK)
