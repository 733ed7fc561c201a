import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db.models import Q
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from backend.exceptions import Conflict, Forbidden, NotFound, Unauthenticated
from backend.field_sets import FieldSet
from users.choices import Role
from users.roles import Capability, has_capability

from .serializers import (
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)

User = get_user_model()

logger = logging.getLogger(__name__)

PROFILE_FIELDS = FieldSet("username", "email")


class RegisterUserView(generics.CreateAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        requested_role = serializer.validated_data.get("role", Role.ORDINARY)
        if requested_role == Role.ADMIN and not (
            request.user.is_authenticated
            and has_capability(request.user.role, Capability.MANAGE_USERS)
        ):
            raise Forbidden("Only admins can create admin accounts.")

        username = serializer.validated_data["username"]
        email = serializer.validated_data["email"]
        if User.objects.filter(Q(username=username) | Q(email=email)).exists():
            raise Conflict("Username or email already exists.")

        try:
            user = serializer.save()
        except IntegrityError:
            raise Conflict("Username or email already exists.")

        logger.info(f"[Register] User {user.id} registered with role {user.role}")
        return Response(
            {
                "message": "User registered successfully.",
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class CustomLoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = User.objects.filter(email=serializer.validated_data["email"]).first()
        if (
            user is None
            or not user.is_active
            or not user.check_password(serializer.validated_data["password"])
        ):
            raise Unauthenticated("Invalid email or password.")

        refresh = RefreshToken.for_user(user)
        return Response(
            {
                "message": "Login successful",
                "token": str(refresh.access_token),
                "refresh": str(refresh),
            },
            status=status.HTTP_200_OK,
        )


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get_object(self):
        user = User.objects.filter(pk=self.request.user.id).first()
        if user is None:
            raise NotFound("User not found")
        return user

    def get(self, request):
        return Response(UserSerializer(self.get_object()).data)

    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        taken = User.objects.exclude(pk=request.user.id)
        if "username" in data and taken.filter(username=data["username"]).exists():
            raise Conflict("This username is already taken.")
        if "email" in data and taken.filter(email=data["email"]).exists():
            raise Conflict("This email is already in use.")

        PROFILE_FIELDS.apply(
            User.objects.filter(pk=request.user.id), data, updated_at=timezone.now()
        )
        return Response(UserSerializer(self.get_object()).data)
