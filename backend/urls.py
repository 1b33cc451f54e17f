from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/accounts/", include("accounts.urls")),
    path("api/", include("profiles.urls")),
    path("api/", include("visibility.urls")),
    path("api/", include("posts.urls")),
    path("api/", include("engagement.urls")),
    path("api/", include("comments.urls")),
    path("api/followers/", include("followers.urls")),
    path("api/", include("notifications.urls")),
]
