# tests/conftest.py

import pytest
from rest_framework.test import APIClient

from tareas.models import Usuario
from tareas.token import CustomRefreshToken

PASSWORD = 'ClaveSegura#2024'


@pytest.fixture(autouse=True)
def _ajustes_de_prueba(settings, tmp_path):
    """Hasher rápido y fotos de perfil en un directorio temporal."""
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    settings.MEDIA_ROOT = str(tmp_path / 'media')


@pytest.fixture()
def crear_usuario(db):
    def _crear(username, **extra):
        return Usuario.objects.create_user(username=username, password=PASSWORD, **extra)
    return _crear


@pytest.fixture()
def bob(crear_usuario):
    return crear_usuario('bob')


@pytest.fixture()
def alice(crear_usuario):
    return crear_usuario('alice')


@pytest.fixture()
def admin(crear_usuario):
    return crear_usuario('admin', role=Usuario.ROL_ADMIN, permisos=True)


@pytest.fixture()
def api():
    return APIClient()


@pytest.fixture()
def cliente_de():
    """APIClient con el token de acceso del usuario en la cabecera Authorization."""
    def _cliente(usuario):
        client = APIClient()
        token = CustomRefreshToken.for_user(usuario).access_token
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        return client
    return _cliente


@pytest.fixture()
def cliente_bob(cliente_de, bob):
    return cliente_de(bob)


@pytest.fixture()
def cliente_alice(cliente_de, alice):
    return cliente_de(alice)


@pytest.fixture()
def cliente_admin(cliente_de, admin):
    return cliente_de(admin)


@pytest.fixture()
def crear_tarea(cliente_bob):
    """Crea una tarea de bob por la API y devuelve el cuerpo de la respuesta."""
    def _crear(**campos):
        payload = {'title': 'Tarea de prueba'}
        payload.update(campos)
        response = cliente_bob.post('/api/tasks', payload)
        assert response.status_code == 201, response.data
        return response.data
    return _crear
