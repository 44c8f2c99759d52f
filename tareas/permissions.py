# tareas/permissions.py
from rest_framework.permissions import BasePermission

from .models import Usuario


def tiene_permisos_admin(request):
    # Se decide por el claim "permisos" del token, nunca por el rol.
    token = request.auth
    try:
        return bool(token is not None and token.get('permisos', False))
    except AttributeError:
        return False


class IsAdminPermiso(BasePermission):
    message = 'No tienes permisos de administrador'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and tiene_permisos_admin(request))


class IsAdminOrBootstrap(BasePermission):
    """
    Alta de usuarios: abierta sólo mientras no existe ninguna cuenta (la
    primera será administradora); después exige permisos de administrador.
    """
    message = 'No tienes permisos de administrador'

    def has_permission(self, request, view):
        if not Usuario.objects.exists():
            return True
        if not (request.user and request.user.is_authenticated):
            # DRF responde 401 cuando la petición no trae credenciales.
            return False
        return tiene_permisos_admin(request)
