from django.urls import path
from .views import ProfileDetailView

urlpatterns = [
    path('profiles/<int:user_id>/', ProfileDetailView.as_view(), name='profile_detail'),
]
