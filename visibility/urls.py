from django.urls import path
from .views import PrivacyCheckView

urlpatterns = [
    path('privacy/check/<int:user_id>/', PrivacyCheckView.as_view(), name='privacy_check'),
]
