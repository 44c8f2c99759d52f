# tareas/authentication.py
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.settings import api_settings

from .models import Usuario


class CustomJWTAuthentication(JWTAuthentication):
    def get_user(self, validated_token):
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken('El token no contiene la identidad del usuario')

        try:
            user = Usuario.objects.get(id=user_id)
        except Usuario.DoesNotExist:
            raise InvalidToken('Usuario no encontrado')

        if not user.is_active:
            raise InvalidToken('Usuario inactivo')
        return user
