from django.contrib import admin
from .models import Like, Save

@admin.register(Like, Save)
class EngagementAdmin(admin.ModelAdmin):
    list_display = ['user', 'post', 'created_at']
    list_filter = ['created_at']
    search_fields = ['user__profile__profile_name']
    readonly_fields = ['created_at']
    raw_id_fields = ['user', 'post']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user__profile', 'post')
