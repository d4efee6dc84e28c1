"""
Views for user registration, token authentication and session management.
"""

import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import RegisterSerializer, UserSerializer
from .services import UserAlreadyExistsError, UserService

# Get logger for this module
logger = logging.getLogger(__name__)


class RegisterView(APIView):
    """
    Register a new Basic user.

    Returns 201 with the user representation, or 409 when the email is
    already registered.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = UserService.register_user(**serializer.validated_data)
        except UserAlreadyExistsError as e:
            return Response({"detail": str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class CurrentUserView(APIView):
    """
    Return the authenticated user.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class LogoutView(APIView):
    """
    Logout view that blacklists refresh tokens.

    Always answers with success so the response does not reveal whether the
    submitted token was valid.
    """

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        refresh_token = request.data.get("refresh", "")

        if refresh_token and isinstance(refresh_token, str) and "." in refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
                logger.info(
                    "Refresh token blacklisted",
                    extra={"action": "logout_token_blacklisted", "component": "LogoutView"},
                )
            except TokenError as e:
                # Expired or malformed tokens need no blacklisting
                logger.warning(f"Token blacklisting failed: {str(e)}")

        return Response({"detail": "Successfully logged out."}, status=status.HTTP_200_OK)
