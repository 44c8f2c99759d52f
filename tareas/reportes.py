# tareas/reportes.py
from collections import Counter

from .models import EstadoTarea, PrioridadTarea

TIPOS_REPORTE = ('tasks', 'projects', 'users')


def estadisticas(tareas):
    """Totales del tablero. "Completada" se decide con EstadoTarea.es_terminal."""
    resumen = {'total': 0, 'completed': 0, 'pending': 0, 'highPriority': 0, 'overdue': 0}
    for tarea in tareas:
        resumen['total'] += 1
        if tarea.esta_completada():
            resumen['completed'] += 1
        else:
            resumen['pending'] += 1
        if PrioridadTarea.es_alta(tarea.prioridad):
            resumen['highPriority'] += 1
        if tarea.esta_vencida():
            resumen['overdue'] += 1
    return resumen


def reporte(tipo, tareas, proyectos=(), usuarios=()):
    """Cuenta tareas por estado, por proyecto o por asignado."""
    if tipo == 'tasks':
        conteo = Counter(t.estado or EstadoTarea.PENDIENTE for t in tareas)
        filas = [{'label': estado, 'count': cantidad} for estado, cantidad in conteo.items()]
    elif tipo == 'projects':
        conteo = Counter(t.proyecto_id for t in tareas)
        filas = [{'label': p.nombre, 'count': conteo.get(p.pk, 0)} for p in proyectos]
    elif tipo == 'users':
        conteo = Counter(t.asignado_a_id for t in tareas)
        filas = [{'label': u.username, 'count': conteo.get(u.pk, 0)} for u in usuarios]
    else:
        raise ValueError(f'Tipo de reporte desconocido: {tipo}')
    return {'type': tipo, 'rows': filas}
