# tests/test_auth.py

from datetime import timedelta

import pytest

from tareas.models import Usuario
from tareas.token import CustomRefreshToken

from .conftest import PASSWORD

pytestmark = pytest.mark.django_db

NUEVA_PASSWORD = 'OtraClave#2025'


class TestLogin:

    def test_login_returns_token_and_user(self, api, bob):
        response = api.post('/api/login', {'username': 'bob', 'password': PASSWORD})

        assert response.status_code == 200
        assert response.data['token']
        assert response.data['refresh']
        assert response.data['user'] == {
            'username': 'bob',
            'role': 'user',
            'permisos': False,
            'displayName': '',
        }

    def test_token_from_login_authenticates(self, api, bob):
        token = api.post('/api/login', {'username': 'bob', 'password': PASSWORD}).data['token']

        api.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        assert api.get('/api/tasks').status_code == 200

    @pytest.mark.parametrize('username, password', [
        ('bob', 'incorrecta'),
        ('nadie', PASSWORD),
        ('BOB', PASSWORD),
    ])
    def test_bad_credentials_share_one_message(self, api, bob, username, password):
        response = api.post('/api/login', {'username': username, 'password': password})

        assert response.status_code == 401
        assert response.data == {'error': 'Credenciales inválidas'}

    def test_inactive_account_cannot_log_in(self, api, crear_usuario):
        crear_usuario('baja', is_active=False)

        response = api.post('/api/login', {'username': 'baja', 'password': PASSWORD})

        assert response.status_code == 401
        assert response.data == {'error': 'Credenciales inválidas'}

    def test_missing_fields_are_a_validation_error(self, api):
        response = api.post('/api/login', {'username': 'bob'})

        assert response.status_code == 400

    def test_refresh_issues_new_access_token(self, api, bob):
        refresh = api.post('/api/login', {'username': 'bob', 'password': PASSWORD}).data['refresh']

        response = api.post('/api/token/refresh', {'refresh': refresh})

        assert response.status_code == 200
        assert response.data['access']


class TestTokenGate:

    def test_missing_token(self, api):
        assert api.get('/api/tasks').status_code == 401

    def test_malformed_token(self, api):
        api.credentials(HTTP_AUTHORIZATION='Bearer esto.no.es-un-jwt')

        assert api.get('/api/tasks').status_code == 401

    def test_wrong_scheme(self, api, bob):
        token = CustomRefreshToken.for_user(bob).access_token
        api.credentials(HTTP_AUTHORIZATION=f'Token {token}')

        assert api.get('/api/tasks').status_code == 401

    def test_expired_token(self, api, bob):
        token = CustomRefreshToken.for_user(bob).access_token
        token.set_exp(lifetime=timedelta(seconds=-1))
        api.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        assert api.get('/api/tasks').status_code == 401

    def test_token_of_deleted_user(self, cliente_bob, bob):
        bob.delete()

        assert cliente_bob.get('/api/tasks').status_code == 401

    def test_token_of_deactivated_user(self, cliente_bob, bob):
        bob.is_active = False
        bob.save()

        response = cliente_bob.get('/api/tasks')

        assert response.status_code == 401
        assert response.data == {'error': 'Usuario inactivo'}

    def test_token_carries_identity_claims(self, admin):
        token = CustomRefreshToken.for_user(admin).access_token

        assert token['username'] == 'admin'
        assert token['role'] == 'admin'
        assert token['permisos'] is True


class TestUsuarios:

    def test_first_account_is_open_and_becomes_admin(self, api):
        response = api.post('/api/users', {'username': 'root', 'password': PASSWORD})

        assert response.status_code == 201
        assert response.data['role'] == 'admin'
        assert response.data['permisos'] is True
        assert 'password' not in response.data

        root = Usuario.objects.get(username='root')
        assert root.check_password(PASSWORD)

    def test_registration_closes_after_first_account(self, api, bob):
        response = api.post('/api/users', {'username': 'intruso', 'password': PASSWORD})

        assert response.status_code == 401
        assert not Usuario.objects.filter(username='intruso').exists()

    def test_regular_user_cannot_create_users(self, cliente_bob):
        response = cliente_bob.post('/api/users', {'username': 'carol', 'password': PASSWORD})

        assert response.status_code == 403
        assert response.data == {'error': 'No tienes permisos de administrador'}

    def test_admin_creates_regular_user(self, cliente_admin):
        response = cliente_admin.post('/api/users', {
            'username': 'carol',
            'password': PASSWORD,
            'displayName': 'Carol <C>',
        })

        assert response.status_code == 201
        assert response.data['role'] == 'user'
        assert response.data['permisos'] is False
        assert response.data['displayName'] == 'Carol &lt;C&gt;'

    def test_admin_role_without_permisos_is_not_admin(self, cliente_de, crear_usuario):
        jefa = crear_usuario('jefa', role=Usuario.ROL_ADMIN, permisos=False)

        response = cliente_de(jefa).post('/api/users', {'username': 'carol', 'password': PASSWORD})

        assert response.status_code == 403

    def test_permisos_are_read_from_the_token(self, cliente_bob, bob):
        bob.permisos = True
        bob.save()

        # El token se emitió antes del cambio.
        response = cliente_bob.post('/api/users', {'username': 'carol', 'password': PASSWORD})

        assert response.status_code == 403

    def test_duplicate_username(self, cliente_admin, bob):
        response = cliente_admin.post('/api/users', {'username': 'bob', 'password': PASSWORD})

        assert response.status_code == 400
        assert response.data['errors'] == ['El nombre de usuario ya existe']

    def test_usernames_are_case_sensitive(self, cliente_admin, bob):
        response = cliente_admin.post('/api/users', {'username': 'Bob', 'password': PASSWORD})

        assert response.status_code == 201

    def test_weak_password_is_rejected(self, cliente_admin):
        response = cliente_admin.post('/api/users', {'username': 'carol', 'password': '123'})

        assert response.status_code == 400
        assert not Usuario.objects.filter(username='carol').exists()

    def test_list_users(self, cliente_bob, alice):
        response = cliente_bob.get('/api/users')

        assert response.status_code == 200
        assert [u['username'] for u in response.data] == ['bob', 'alice']


class TestCambioPassword:

    def test_admin_resets_password(self, cliente_admin, bob):
        response = cliente_admin.put('/api/users/bob/password', {'password': NUEVA_PASSWORD})

        assert response.status_code == 200
        assert response.data == {'message': 'Contraseña actualizada correctamente'}
        bob.refresh_from_db()
        assert bob.check_password(NUEVA_PASSWORD)

    def test_regular_user_cannot_reset(self, cliente_bob, alice):
        response = cliente_bob.put('/api/users/alice/password', {'password': NUEVA_PASSWORD})

        assert response.status_code == 403
        alice.refresh_from_db()
        assert alice.check_password(PASSWORD)

    def test_unknown_user(self, cliente_admin):
        response = cliente_admin.put('/api/users/nadie/password', {'password': NUEVA_PASSWORD})

        assert response.status_code == 404
        assert response.data == {'error': 'Usuario no encontrado'}

    def test_new_password_is_validated(self, cliente_admin, bob):
        response = cliente_admin.put('/api/users/bob/password', {'password': 'abc'})

        assert response.status_code == 400
        assert response.data['errors']
