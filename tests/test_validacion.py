# tests/test_validacion.py

import pytest

from tareas.models import Historial, Notificacion, Tarea
from tareas.validacion import limpiar_texto, validar_proyecto, validar_tarea


def test_valid_task_has_no_errors():
    assert validar_tarea({'titulo': 'Ship release', 'fecha_vencimiento': '2030-05-01', 'horas_estimadas': 8}) == []


def test_all_violations_are_reported_together():
    errores = validar_tarea({
        'titulo': '',
        'fecha_vencimiento': '1889-12-31',
        'horas_estimadas': 10001,
        'estado': 'Archivada',
    })

    assert errores == [
        'El título es requerido',
        'La fecha de vencimiento debe estar entre 1890 y 2100',
        'Las horas estimadas deben estar entre 0 y 10000',
        'El estado "Archivada" no es válido',
    ]


@pytest.mark.parametrize('titulo, valido', [
    ('a' * 200, True),
    ('a' * 201, False),
    ('   ', False),
])
def test_title_bounds(titulo, valido):
    errores = validar_tarea({'titulo': titulo})
    assert (errores == []) is valido


@pytest.mark.parametrize('fecha, valido', [
    ('1890-01-01', True),
    ('2100-12-31', True),
    ('1889-12-31', False),
    ('2101-01-01', False),
    ('2023-02-30', False),
    ('mañana', False),
    ('', True),
    (None, True),
])
def test_due_date_bounds(fecha, valido):
    errores = validar_tarea({'titulo': 'x', 'fecha_vencimiento': fecha})
    assert (errores == []) is valido


@pytest.mark.parametrize('horas, valido', [
    (0, True),
    (10000, True),
    ('10000', True),
    (10001, False),
    (-1, False),
])
def test_estimated_hours_bounds(horas, valido):
    errores = validar_tarea({'titulo': 'x', 'horas_estimadas': horas})
    assert (errores == []) is valido


def test_invalid_date_message():
    assert validar_tarea({'titulo': 'x', 'fecha_vencimiento': '2023-13-01'}) == [
        'La fecha de vencimiento no es una fecha válida'
    ]


def test_project_name_rules():
    assert validar_proyecto({'nombre': 'Web'}) == []
    assert validar_proyecto({'nombre': ''}) == ['El nombre es requerido']
    assert validar_proyecto({'nombre': 'n' * 201}) == ['El nombre no puede exceder 200 caracteres']


def test_markup_is_neutralized():
    assert limpiar_texto('  <script>alert(1)</script> ') == '&lt;script&gt;alert(1)&lt;/script&gt;'
    assert limpiar_texto(None) == ''


def test_cleaning_twice_changes_nothing():
    texto = "Bob's <release> & notes"
    limpio = limpiar_texto(texto)

    assert limpio == 'Bob&#x27;s &lt;release&gt; &amp; notes'
    assert limpiar_texto(limpio) == limpio


def test_length_is_measured_on_the_plain_text():
    assert validar_tarea({'titulo': 'a' * 199 + '&'}) == []
    assert validar_tarea({'titulo': limpiar_texto('a' * 199 + '&')}) == []
    assert validar_proyecto({'nombre': "'" * 200}) == []


@pytest.mark.django_db
class TestTaskValidationOverApi:

    def test_title_of_201_characters_is_rejected(self, cliente_bob):
        response = cliente_bob.post('/api/tasks', {'title': 'a' * 201})

        assert response.status_code == 400
        assert 'El título no puede exceder 200 caracteres' in response.data['errors']
        assert '200' in response.data['error']

    @pytest.mark.parametrize('fecha', ['1889-06-01', '2101-06-01'])
    def test_due_date_out_of_range_is_rejected(self, cliente_bob, fecha):
        response = cliente_bob.post('/api/tasks', {'title': 'x', 'dueDate': fecha})

        assert response.status_code == 400
        assert response.data['errors'] == ['La fecha de vencimiento debe estar entre 1890 y 2100']

    def test_estimated_hours_over_limit_is_rejected(self, cliente_bob):
        response = cliente_bob.post('/api/tasks', {'title': 'x', 'estimatedHours': 10001})

        assert response.status_code == 400
        assert response.data['errors'] == ['Las horas estimadas deben estar entre 0 y 10000']

    @pytest.mark.parametrize('fecha, horas', [('1890-01-01', 0), ('2100-12-31', 10000)])
    def test_values_at_the_boundary_are_accepted(self, cliente_bob, fecha, horas):
        response = cliente_bob.post('/api/tasks', {
            'title': 'a' * 200,
            'dueDate': fecha,
            'estimatedHours': horas,
        })

        assert response.status_code == 201, response.data
        assert response.data['dueDate'] == fecha
        assert response.data['estimatedHours'] == horas

    def test_field_and_rule_errors_are_collected(self, cliente_bob):
        response = cliente_bob.post('/api/tasks', {
            'title': '',
            'assignedTo': 'nadie',
            'priority': 'Urgente',
        })

        assert response.status_code == 400
        assert set(response.data['errors']) == {
            'El título es requerido',
            'La prioridad "Urgente" no es válida',
            'El usuario asignado no existe',
        }
        assert response.data['error'] == ', '.join(response.data['errors'])

    def test_rejected_task_leaves_no_side_effects(self, cliente_bob, alice):
        response = cliente_bob.post('/api/tasks', {'title': '', 'assignedTo': 'alice'})

        assert response.status_code == 400
        assert not Tarea.objects.exists()
        assert not Historial.objects.exists()
        assert not Notificacion.objects.exists()

    def test_markup_is_stored_escaped(self, cliente_bob):
        response = cliente_bob.post('/api/tasks', {'title': '<b>Negrita</b>', 'description': '<img src=x>'})

        assert response.status_code == 201
        tarea = Tarea.objects.get(pk=response.data['id'])
        assert tarea.titulo == '&lt;b&gt;Negrita&lt;/b&gt;'
        assert tarea.descripcion == '&lt;img src=x&gt;'

    def test_entities_do_not_count_toward_the_title_limit(self, cliente_bob):
        response = cliente_bob.post('/api/tasks', {'title': 'a' * 199 + '&'})

        assert response.status_code == 201, response.data
        assert Tarea.objects.get().titulo == 'a' * 199 + '&amp;'
