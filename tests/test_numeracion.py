# tests/test_numeracion.py

from concurrent.futures import ThreadPoolExecutor
import threading
from unittest import mock

import pytest
from django.db import DatabaseError, connection

from tareas.exceptions import ErrorPersistencia
from tareas.models import Contador, Proyecto, Tarea
from tareas.numeracion import siguiente_numero

pytestmark = pytest.mark.django_db


def test_numbers_increase_per_collection():
    assert siguiente_numero('tareas') == 1
    assert siguiente_numero('tareas') == 2
    assert siguiente_numero('proyectos') == 1
    assert siguiente_numero('tareas') == 3

    assert Contador.objects.get(coleccion='tareas').valor == 3
    assert Contador.objects.get(coleccion='proyectos').valor == 1


def test_collection_name_is_required():
    with pytest.raises(ValueError):
        siguiente_numero('')


def test_entities_get_unique_increasing_numbers(bob):
    numeros = [Tarea.objects.create(titulo=f'T{i}', creado_por=bob).numero for i in range(10)]

    assert numeros == sorted(numeros)
    assert len(set(numeros)) == len(numeros)


def test_number_is_not_reassigned_on_save(bob):
    tarea = Tarea.objects.create(titulo='Original', creado_por=bob)
    numero = tarea.numero

    tarea.titulo = 'Cambiada'
    tarea.save()
    tarea.refresh_from_db()

    assert tarea.numero == numero
    assert Contador.objects.get(coleccion='tareas').valor == numero


def test_numbers_are_not_reused_after_delete(bob):
    primera = Tarea.objects.create(titulo='Uno', creado_por=bob)
    primera.delete()

    segunda = Tarea.objects.create(titulo='Dos', creado_por=bob)

    assert segunda.numero > primera.numero


def test_each_collection_numbers_its_own_rows(bob):
    proyecto = Proyecto.objects.create(nombre='Web', creado_por=bob)
    tarea = Tarea.objects.create(titulo='Diseño', creado_por=bob, proyecto=proyecto)

    assert proyecto.numero == 1
    assert tarea.numero == 1
    # bob ya consumió el número 1 de usuarios
    assert bob.numero == 1


def test_counter_failure_persists_nothing(bob):
    with mock.patch.object(Contador.objects, 'select_for_update', side_effect=DatabaseError('sin conexión')):
        with pytest.raises(ErrorPersistencia):
            Tarea.objects.create(titulo='Sin número', creado_por=bob)

    assert not Tarea.objects.filter(titulo='Sin número').exists()


def test_counter_failure_returns_500(cliente_bob):
    with mock.patch.object(Contador.objects, 'select_for_update', side_effect=DatabaseError('sin conexión')):
        response = cliente_bob.post('/api/tasks', {'title': 'Sin número'})

    assert response.status_code == 500
    assert response.data == {'error': 'No se pudo asignar un número para tareas'}
    assert not Tarea.objects.exists()


@pytest.mark.django_db(transaction=True)
def test_concurrent_allocations_never_collide():
    hilos = 8
    por_hilo = 5
    salida = threading.Barrier(hilos)

    def pedir_numeros():
        try:
            salida.wait()
            return [siguiente_numero('tareas') for _ in range(por_hilo)]
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=hilos) as pool:
        futuros = [pool.submit(pedir_numeros) for _ in range(hilos)]
        numeros = [numero for futuro in futuros for numero in futuro.result()]

    assert sorted(numeros) == list(range(1, hilos * por_hilo + 1))
    assert Contador.objects.get(coleccion='tareas').valor == hilos * por_hilo
