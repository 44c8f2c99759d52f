# tareas/notificaciones.py
import logging

from .models import Notificacion

logger = logging.getLogger(__name__)


def notificar(usuario, mensaje, tipo, enlace=''):
    notificacion = Notificacion.objects.create(
        usuario=usuario,
        mensaje=mensaje,
        tipo=tipo,
        enlace=enlace or '',
    )
    logger.info('Notificación #%s (%s) para %s', notificacion.numero, tipo, usuario.username)
    return notificacion


def marcar_todas_leidas(usuario):
    """Marca como leídas todas las notificaciones del usuario y devuelve cuántas cambiaron."""
    actualizadas = Notificacion.objects.filter(usuario=usuario, leida=False).update(leida=True)
    logger.info('%s notificaciones marcadas como leídas para %s', actualizadas, usuario.username)
    return actualizadas


def bandeja(usuario):
    return Notificacion.objects.filter(usuario=usuario, leida=False)


def todas(usuario):
    return Notificacion.objects.filter(usuario=usuario)
