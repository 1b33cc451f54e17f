from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from .services import check_profile_access


class PrivacyCheckView(APIView):
    """Tell the caller whether they may see ``user_id``'s full profile, and why."""
    permission_classes = [AllowAny]

    def get(self, request, user_id):
        decision = check_profile_access(request.user, user_id)
        return Response({
            "data": decision._asdict(),
            "message": "Access evaluated.",
            "type": "success",
        })
