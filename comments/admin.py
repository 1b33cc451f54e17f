from django.contrib import admin
from django.utils.html import format_html
from django.urls import reverse
from .models import Comment


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ["truncated_content", "author_link", "post_link", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["content", "author__profile__profile_name"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["author", "post"]

    def truncated_content(self, obj):
        return obj.content[:50] + "..." if len(obj.content) > 50 else obj.content

    truncated_content.short_description = "Content"

    def author_link(self, obj):
        url = reverse("admin:accounts_customuser_change", args=[obj.author.pk])
        return format_html('<a href="{}">{}</a>', url, obj.author.profile_name)

    author_link.short_description = "Author"

    def post_link(self, obj):
        url = reverse("admin:posts_post_change", args=[obj.post.pk])
        return format_html('<a href="{}">Post {}</a>', url, obj.post.pk)

    post_link.short_description = "Post"

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("author__profile", "post")
