"""
Authentication views for dashboard users.
Handles login, register, logout, profile and the WebinarFuel bearer token.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import BearerTokenSerializer, LoginSerializer, RegisterSerializer, UserSerializer

logger = logging.getLogger(__name__)


def issue_token(user):
    """Return a signed access token carrying the user id and email."""
    refresh = RefreshToken.for_user(user)
    refresh['email'] = user.email
    return str(refresh.access_token)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    User login endpoint.

    POST /api/v1/auth/login/
    Body: { "email": "user@example.com", "password": "password123" }

    Returns: { "token": "...", "user": {...} }
    """
    serializer = LoginSerializer(data=request.data)

    if serializer.is_valid():
        user = serializer.validated_data['user']
        return Response({
            'message': 'Login successful',
            'token': issue_token(user),
            'user': UserSerializer(user).data
        }, status=status.HTTP_200_OK)

    logger.info("Rejected login for %s", request.data.get('email'))
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """
    User registration endpoint.

    POST /api/v1/auth/register/
    Body: { "email": "...", "password": "...", "name": "..." }

    Returns: { "message": "...", "token": "...", "user": {...} }
    """
    serializer = RegisterSerializer(data=request.data)

    if serializer.is_valid():
        user = serializer.save()
        logger.info("Registered user %s", user.id)
        return Response({
            'message': 'User created successfully',
            'token': issue_token(user),
            'user': UserSerializer(user).data
        }, status=status.HTTP_201_CREATED)

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """
    User logout endpoint. Blacklists the refresh token when one is supplied.

    POST /api/v1/auth/logout/
    """
    refresh_token = request.data.get('refresh_token')
    if refresh_token:
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as e:
            logger.warning("Logout failed: %s", e)
            return Response({'error': 'Logout failed'}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'message': 'Logged out successfully'}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    """
    Get current authenticated user.

    GET /api/v1/auth/me/
    """
    return Response({
        'user': UserSerializer(request.user).data
    })


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def bearer_token(request):
    """
    Store the WebinarFuel bearer token for the current user.

    PUT /api/v1/auth/bearer-token/
    Body: { "bearer_token": "..." }
    """
    serializer = BearerTokenSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    request.user.set_bearer_token(serializer.validated_data['bearer_token'])
    return Response({'message': 'Bearer token updated successfully'}, status=status.HTTP_200_OK)
