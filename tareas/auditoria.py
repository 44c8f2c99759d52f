# tareas/auditoria.py
"""
Registro de auditoría de tareas.

El historial sólo crece: no existe operación para editar o borrar una
entrada (el modelo lo impide también). Las dos lecturas soportadas son el
historial de una tarea y el feed global de entradas recientes.
"""
import logging

from django.conf import settings

from .models import Historial

logger = logging.getLogger(__name__)


def registrar(tarea, actor, accion, campo, anterior, nuevo):
    entrada = Historial.objects.create(
        tarea_id=tarea.pk,
        tarea_numero=tarea.numero,
        propietario=tarea.creado_por,
        usuario=actor,
        accion=accion,
        campo=campo,
        valor_anterior=anterior or '',
        valor_nuevo=nuevo or '',
    )
    logger.info(
        'Historial #%s: tarea #%s %s por %s',
        entrada.numero, tarea.numero, accion, actor.username
    )
    return entrada


def _visible_para(contexto):
    entradas = Historial.objects.select_related('usuario')
    if contexto.permisos:
        return entradas
    return entradas.filter(propietario=contexto.usuario)


def historial_de_tarea(contexto, tarea_id):
    """Entradas de una tarea en orden cronológico."""
    return list(_visible_para(contexto).filter(tarea_id=tarea_id).order_by('timestamp', 'numero'))


def historial_reciente(contexto, limite=None):
    """Últimas ``limite`` entradas, la más reciente primero."""
    if limite is None:
        limite = settings.HISTORIAL_LIMITE
    return list(_visible_para(contexto).order_by('-timestamp', '-numero')[:limite])
