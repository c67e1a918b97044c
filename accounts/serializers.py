"""
Serializers for user authentication and account settings.
"""
from django.conf import settings
from django.contrib.auth import authenticate
from rest_framework import serializers

from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User model."""

    class Meta:
        model = User
        fields = ('id', 'email', 'name', 'bearer_token', 'created_at')
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    """Serializer for login requests."""
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, attrs):
        email = attrs.get('email')
        password = attrs.get('password')

        if email and password:
            user = authenticate(username=email, password=password)
            if not user:
                raise serializers.ValidationError('Invalid email or password.')
            if not user.is_active:
                raise serializers.ValidationError('User account is disabled.')
            attrs['user'] = user
        else:
            raise serializers.ValidationError('Must include "email" and "password".')

        return attrs


class RegisterSerializer(serializers.Serializer):
    """Serializer for user registration."""
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'}, min_length=8)
    name = serializers.CharField(max_length=255)

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('A user with this email already exists.')
        return value

    def create(self, validated_data):
        email = validated_data['email']
        # username mirrors email because USERNAME_FIELD is email
        return User.objects.create_user(
            username=email,
            email=email,
            password=validated_data['password'],
            name=validated_data['name'].strip(),
        )


class BearerTokenSerializer(serializers.Serializer):
    """Payload for PUT /auth/bearer-token/."""
    bearer_token = serializers.CharField(
        trim_whitespace=True,
        min_length=settings.BEARER_TOKEN_MIN_LENGTH,
        error_messages={
            'required': 'Bearer token is required',
            'blank': 'Bearer token is required',
            'min_length': 'Bearer token appears to be too short',
        },
    )
