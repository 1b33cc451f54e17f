from django.urls import path
from .views import (
    ConnectionListView,
    FollowView,
    PendingRequestListView,
    RemoveFollowerView,
    RespondFollowRequestView,
    UnfollowView,
)

urlpatterns = [
    path('follow/', FollowView.as_view(), name='follow'),
    path('follow/<int:user_id>/', UnfollowView.as_view(), name='unfollow'),
    path('requests/', PendingRequestListView.as_view(), name='follow_requests'),
    path('requests/<int:pk>/respond/', RespondFollowRequestView.as_view(), name='follow_request_respond'),
    path('<int:user_id>/remove/', RemoveFollowerView.as_view(), name='remove_follower'),
    path('<int:user_id>/followers/', ConnectionListView.as_view(direction="followers"), name='user_followers'),
    path('<int:user_id>/following/', ConnectionListView.as_view(direction="following"), name='user_following'),
]
