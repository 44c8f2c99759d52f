from getpass import getpass

from django.core.management.base import BaseCommand, CommandError
from django.db import IntegrityError

from tareas.models import Usuario


class Command(BaseCommand):
    help = 'Crea una cuenta de administrador (role=admin, permisos=true)'

    def add_arguments(self, parser):
        parser.add_argument('username')
        parser.add_argument('--password', help='Si se omite se pide por consola')
        parser.add_argument('--nombre', default='', help='Nombre para mostrar')

    def handle(self, *args, **options):
        username = options['username']

        if Usuario.objects.filter(username=username).exists():
            self.stdout.write(
                self.style.WARNING(f'El usuario {username} ya existe')
            )
            return

        password = options['password'] or getpass('Contraseña: ')
        if not password:
            raise CommandError('La contraseña no puede estar vacía')

        try:
            Usuario.objects.create_superuser(username, password, nombre=options['nombre'])
        except IntegrityError as e:
            raise CommandError(f'Error creando usuario: {e}')

        self.stdout.write(
            self.style.SUCCESS(f'Administrador creado: {username}')
        )
