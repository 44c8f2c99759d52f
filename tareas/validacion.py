# tareas/validacion.py
"""
Reglas de validación de tareas y proyectos.

Cada función devuelve la lista completa de errores encontrados (vacía si los
datos son válidos) en lugar de detenerse en el primero, para que el cliente
pueda mostrar todos los problemas de una sola vez.
"""
from decimal import Decimal, InvalidOperation
import html

from django.utils.dateparse import parse_date
from django.utils.html import escape

from .models import EstadoTarea, PrioridadTarea

LARGO_MAXIMO_TITULO = 200
LARGO_MAXIMO_NOMBRE = 200
ANIO_MINIMO = 1890
ANIO_MAXIMO = 2100
HORAS_MAXIMAS = Decimal('10000')


def texto_plano(valor):
    """Texto recortado y sin entidades HTML; sobre él se miden los largos."""
    if valor is None:
        return ''
    return html.unescape(str(valor).strip())


def limpiar_texto(valor):
    """
    Recorta y escapa el marcado para que nunca se interprete como HTML activo.
    Aplicarla a un texto ya limpio lo deja igual.
    """
    return escape(texto_plano(valor))


def parsear_fecha(valor):
    """Convierte 'AAAA-MM-DD' en date; vacío es None. ValueError si no es una fecha real."""
    if valor in (None, ''):
        return None
    if hasattr(valor, 'year'):
        return valor
    fecha = parse_date(str(valor).strip())
    if fecha is None:
        raise ValueError(f'Fecha inválida: {valor}')
    return fecha


def _decimal(valor):
    if valor in (None, ''):
        return None
    try:
        numero = Decimal(str(valor))
    except (InvalidOperation, ValueError):
        return None
    return numero if numero.is_finite() else None


def validar_tarea(datos):
    errores = []

    titulo = texto_plano(datos.get('titulo'))
    if not titulo.strip():
        errores.append('El título es requerido')
    if len(titulo) > LARGO_MAXIMO_TITULO:
        errores.append(f'El título no puede exceder {LARGO_MAXIMO_TITULO} caracteres')

    try:
        fecha = parsear_fecha(datos.get('fecha_vencimiento'))
    except ValueError:
        errores.append('La fecha de vencimiento no es una fecha válida')
    else:
        if fecha and not ANIO_MINIMO <= fecha.year <= ANIO_MAXIMO:
            errores.append(f'La fecha de vencimiento debe estar entre {ANIO_MINIMO} y {ANIO_MAXIMO}')

    horas = _decimal(datos.get('horas_estimadas'))
    if horas and (horas < 0 or horas > HORAS_MAXIMAS):
        errores.append(f'Las horas estimadas deben estar entre 0 y {HORAS_MAXIMAS}')

    horas_reales = _decimal(datos.get('horas_reales'))
    if horas_reales is not None and horas_reales < 0:
        errores.append('Las horas reales no pueden ser negativas')

    estado = datos.get('estado')
    if estado and estado not in EstadoTarea.values:
        errores.append(f'El estado "{estado}" no es válido')

    prioridad = datos.get('prioridad')
    if prioridad and prioridad not in PrioridadTarea.values:
        errores.append(f'La prioridad "{prioridad}" no es válida')

    return errores


def validar_proyecto(datos):
    errores = []
    nombre = texto_plano(datos.get('nombre'))
    if not nombre.strip():
        errores.append('El nombre es requerido')
    if len(nombre) > LARGO_MAXIMO_NOMBRE:
        errores.append(f'El nombre no puede exceder {LARGO_MAXIMO_NOMBRE} caracteres')
    return errores
