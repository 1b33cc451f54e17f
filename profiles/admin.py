from django.contrib import admin
from .models import OrganizationMembership, Profile

class ProfileInline(admin.StackedInline):
    """Inline admin for Profile model."""
    model = Profile
    can_delete = False
    verbose_name_plural = 'Profile'
    fk_name = 'user'
    fields = ('profile_name', 'bio', 'visibility', 'follower_count', 'following_count')
    readonly_fields = ('follower_count', 'following_count')

@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["user", "profile_name", "visibility", "follower_count", "following_count"]
    list_filter = ["visibility", "user__is_active"]
    search_fields = ["profile_name", "user__email", "bio"]
    readonly_fields = ["follower_count", "following_count"]

    fieldsets = [
        ("User Information", {"fields": ["user", "profile_name", "bio", "visibility"]}),
        ("Statistics", {
            "fields": ["follower_count", "following_count"],
            "classes": ["collapse"]
        }),
    ]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("user")

@admin.register(OrganizationMembership)
class OrganizationMembershipAdmin(admin.ModelAdmin):
    list_display = ["key", "user", "created_at"]
    search_fields = ["key", "user__email"]
    raw_id_fields = ["user"]
