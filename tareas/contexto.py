# tareas/contexto.py
from dataclasses import dataclass

from .models import Usuario
from .permissions import tiene_permisos_admin


@dataclass(frozen=True)
class Contexto:
    """Identidad de quien actúa en una petición; se pasa a cada operación."""
    usuario: Usuario
    permisos: bool = False

    @classmethod
    def desde_request(cls, request):
        return cls(usuario=request.user, permisos=tiene_permisos_admin(request))
