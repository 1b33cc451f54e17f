from django.urls import path
from .services import LIKE, SAVE
from .views import SavedPostList, ToggleEngagementView

urlpatterns = [
    path('posts/<int:pk>/like/', ToggleEngagementView.as_view(kind=LIKE), name='post-like'),
    path('posts/<int:pk>/save/', ToggleEngagementView.as_view(kind=SAVE), name='post-save'),
    path('saved/', SavedPostList.as_view(), name='saved-posts'),
]
