from django.contrib import admin
from django.contrib.admin import ShowFacets
from .models import Post

@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    show_facets = ShowFacets.ALWAYS
    list_display = ["id", "author", "visibility", "likes_count", "saves_count", "comments_count", "created_at"]
    list_filter = ["visibility", "created_at"]
    search_fields = ["content", "author__profile__profile_name"]
    readonly_fields = ["likes_count", "saves_count", "comments_count", "created_at", "updated_at"]
    raw_id_fields = ["author"]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("author__profile")
