# tareas/numeracion.py
import logging

from django.db import DatabaseError, transaction
from django.db.models import F

from .exceptions import ErrorPersistencia
from .models import Contador

logger = logging.getLogger(__name__)


def siguiente_numero(coleccion):
    """
    Devuelve el siguiente número visible de ``coleccion``.

    Leer, incrementar y devolver ocurre bajo el bloqueo de la fila del
    contador, así que dos altas simultáneas nunca reciben el mismo número.
    Un número entregado no se vuelve a usar aunque la fila se borre.
    """
    if not coleccion:
        raise ValueError('La colección es obligatoria')

    try:
        with transaction.atomic():
            contador, _ = Contador.objects.select_for_update().get_or_create(coleccion=coleccion)
            Contador.objects.filter(pk=contador.pk).update(valor=F('valor') + 1)
            contador.refresh_from_db(fields=['valor'])
    except DatabaseError as e:
        logger.error('No se pudo asignar número para %s: %s', coleccion, e)
        raise ErrorPersistencia(f'No se pudo asignar un número para {coleccion}') from e

    logger.debug('Número %s asignado en %s', contador.valor, coleccion)
    return contador.valor
