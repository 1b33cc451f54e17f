from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import CustomUser

class CustomUserAdmin(UserAdmin):
    """Admin panel configuration for CustomUser."""

    model = CustomUser
    list_display = ("email", "profile_name", "is_staff", "is_active")
    list_filter = ("is_staff", "is_active")
    search_fields = ("email", "profile__profile_name")
    ordering = ("email",)

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Permissions", {"fields": ("is_staff", "is_active", "is_superuser", "groups", "user_permissions")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2", "is_staff", "is_active", "is_superuser"),
            },
        ),
    )

    def get_inline_instances(self, request, obj=None):
        """Show profile information inline."""
        from profiles.admin import ProfileInline

        inlines = super().get_inline_instances(request, obj)
        if obj:
            inlines.append(ProfileInline(self.model, self.admin_site))
        return inlines

admin.site.register(CustomUser, CustomUserAdmin)
