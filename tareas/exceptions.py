# tareas/exceptions.py
import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.db import DatabaseError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ErrorPersistencia(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Error de persistencia'
    default_code = 'persistence_error'


def mensajes_de(detalle):
    """Aplana el detalle de una excepción de DRF en una lista de textos."""
    if isinstance(detalle, dict):
        mensajes = []
        for valor in detalle.values():
            mensajes.extend(mensajes_de(valor))
        return mensajes
    if isinstance(detalle, (list, tuple)):
        mensajes = []
        for valor in detalle:
            mensajes.extend(mensajes_de(valor))
        return mensajes
    return [str(detalle)]


def manejador_excepciones(exc, context):
    """
    Todas las respuestas de error tienen la forma {"error": "<mensaje>"}.

    Los errores de validación agregan "errors" con la lista completa. Los
    errores inesperados se registran con traza y al cliente sólo le llega un
    mensaje genérico.
    """
    if isinstance(exc, DatabaseError):
        logger.error('Error de base de datos en %s', context.get('view').__class__.__name__, exc_info=exc)
        exc = ErrorPersistencia()

    response = exception_handler(exc, context)

    if response is None:
        logger.error('Error no controlado', exc_info=exc)
        return Response(
            {'error': 'Error interno del servidor'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, exceptions.ValidationError):
        mensajes = mensajes_de(exc.detail)
        response.data = {'error': ', '.join(mensajes), 'errors': mensajes}
    elif isinstance(exc, Http404):
        response.data = {'error': str(exc) or 'No encontrado'}
    elif isinstance(exc, DjangoPermissionDenied):
        response.data = {'error': 'No tienes permisos para realizar esta acción'}
    else:
        mensajes = mensajes_de(getattr(exc, 'detail', response.data))
        response.data = {'error': mensajes[0] if mensajes else 'Error'}
    return response
