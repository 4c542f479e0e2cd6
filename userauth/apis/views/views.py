import logging

from django.contrib.auth import authenticate, login, logout
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from userauth.apis.serializers.serializers import LoginSerializer, RegistrationSerializer, UserSerializer

logger = logging.getLogger(__name__)


class SecuredView(APIView):
    """
    Base API view for endpoints that need a signed-in user.
    Authentication itself is whatever REST_FRAMEWORK configures.
    """
    permission_classes = [IsAuthenticated]

    def get_current_user(self, request):
        """get current user from the authenticated request"""
        return request.user


class RegistrationView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        logger.info("RegistrationView.post called")
        serializer = RegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("new user registered as %s", user.email)
        return Response(
            {"message": "User registered successfully, please login"},
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """Password login backed by the Django session."""
    permission_classes = [AllowAny]

    def post(self, request):
        logger.info("LoginView.post called")
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request,
            email=serializer.validated_data['email'].lower(),
            password=serializer.validated_data['password'],
        )
        if user is None:
            logger.info("Login failed: invalid credentials")
            return Response({"error": "Invalid Credentials. Please try again."}, status=status.HTTP_400_BAD_REQUEST)

        login(request, user)
        logger.info("user logged in as %s", user.email)
        return Response({"message": "Login successful", "user": UserSerializer(user).data})


class LogoutView(SecuredView):
    def post(self, request):
        logout(request)
        return Response({"message": "Logged out"})


class MeView(SecuredView):
    def get(self, request):
        user = self.get_current_user(request)
        return Response(UserSerializer(user).data)
