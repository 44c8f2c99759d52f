# tareas/ciclo_vida.py
"""
Ciclo de vida de una tarea: alta, modificación y baja.

Cada operación guarda la tarea, agrega el historial correspondiente y
notifica al asignado dentro de una única transacción, de modo que los tres
efectos se confirman juntos o no se confirma ninguno.
"""
import logging

from django.db import transaction
from rest_framework.exceptions import NotFound

from . import auditoria
from .models import Historial, Notificacion, Tarea
from .notificaciones import notificar

logger = logging.getLogger(__name__)

# Campos que reemplaza un PUT; las horas reales sólo si vienen en la petición.
CAMPOS_REEMPLAZABLES = [
    'titulo',
    'descripcion',
    'estado',
    'prioridad',
    'proyecto',
    'asignado_a',
    'fecha_vencimiento',
    'horas_estimadas',
]


def enlace_tarea(tarea):
    return f'/tasks/{tarea.pk}'


def tareas_de(contexto):
    return Tarea.objects.filter(creado_por=contexto.usuario).select_related(
        'proyecto', 'asignado_a', 'creado_por'
    )


def obtener_tarea(contexto, tarea_id):
    """
    Tarea del usuario en contexto. "No existe" y "es de otro usuario" dan el
    mismo NotFound para no revelar qué ids existen.
    """
    try:
        return tareas_de(contexto).get(pk=tarea_id)
    except (Tarea.DoesNotExist, ValueError, TypeError):
        raise NotFound('Tarea no encontrada')


def _verificar_propietario(contexto, tarea):
    if tarea.creado_por_id != contexto.usuario.pk:
        raise NotFound('Tarea no encontrada')


def crear_tarea(contexto, datos):
    actor = contexto.usuario
    with transaction.atomic():
        tarea = Tarea.objects.create(creado_por=actor, **datos)
        auditoria.registrar(tarea, actor, Historial.CREADA, 'title', '', tarea.titulo)
        if tarea.asignado_a:
            notificar(
                tarea.asignado_a,
                f'Nueva tarea asignada: {tarea.titulo}',
                Notificacion.TAREA_ASIGNADA,
                enlace_tarea(tarea),
            )

    logger.info('Tarea #%s creada por %s', tarea.numero, actor.username)
    return tarea


def actualizar_tarea(contexto, tarea, datos):
    _verificar_propietario(contexto, tarea)
    actor = contexto.usuario

    with transaction.atomic():
        estado_anterior = tarea.estado
        titulo_anterior = tarea.titulo

        for campo in CAMPOS_REEMPLAZABLES:
            setattr(tarea, campo, datos[campo])
        if 'horas_reales' in datos:
            tarea.horas_reales = datos['horas_reales']
        tarea.save()

        if estado_anterior != tarea.estado:
            auditoria.registrar(
                tarea, actor, Historial.ESTADO_CAMBIADO, 'status', estado_anterior, tarea.estado
            )
        if titulo_anterior != tarea.titulo:
            auditoria.registrar(
                tarea, actor, Historial.TITULO_CAMBIADO, 'title', titulo_anterior, tarea.titulo
            )

        # Se avisa en cada modificación mientras haya asignado, cambie o no.
        if tarea.asignado_a:
            notificar(
                tarea.asignado_a,
                f'Tarea actualizada: {tarea.titulo}',
                Notificacion.TAREA_ACTUALIZADA,
                enlace_tarea(tarea),
            )

    logger.info('Tarea #%s actualizada por %s', tarea.numero, actor.username)
    return tarea


def eliminar_tarea(contexto, tarea):
    _verificar_propietario(contexto, tarea)
    actor = contexto.usuario
    numero = tarea.numero

    with transaction.atomic():
        # El título tiene que quedar registrado antes de que la fila desaparezca.
        auditoria.registrar(tarea, actor, Historial.ELIMINADA, 'title', tarea.titulo, '')
        tarea.delete()

    logger.info('Tarea #%s eliminada por %s', numero, actor.username)
