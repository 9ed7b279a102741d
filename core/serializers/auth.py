from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(error_messages={'required': 'Username is required'})
    password = serializers.CharField(error_messages={'required': 'Password is required'})

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)
