"""
Authentication views
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView
from drf_spectacular.utils import extend_schema, OpenApiResponse

from .serializers import UserSerializer, CustomTokenObtainPairSerializer


class CustomTokenObtainPairView(TokenObtainPairView):
    """Obtain an access/refresh token pair together with the user profile"""
    serializer_class = CustomTokenObtainPairSerializer


@extend_schema(
    summary="Get current user",
    description="Retrieve the currently authenticated user's profile",
    responses={
        200: UserSerializer,
        401: OpenApiResponse(description="Unauthorized")
    },
    tags=['Authentication']
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """
    Get current authenticated user
    """
    serializer = UserSerializer(request.user)
    return Response(serializer.data)
