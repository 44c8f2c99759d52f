from rest_framework_simplejwt.tokens import RefreshToken


class CustomRefreshToken(RefreshToken):
    """
    Token con la identidad del usuario embebida. El token de acceso que se
    deriva de él copia estos claims, y ``permisos`` es lo que se revisa en las
    operaciones de administración.
    """

    @classmethod
    def for_user(cls, user):
        token = super().for_user(user)

        # Add custom claims
        token['username'] = user.username
        token['role'] = user.role
        token['permisos'] = user.permisos

        return token
