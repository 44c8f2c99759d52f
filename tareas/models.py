from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models, transaction
from django.utils import timezone


class HistorialInmutable(Exception):
    """Se intentó modificar o borrar una entrada del historial."""

    def __init__(self):
        super().__init__('Las entradas del historial no se pueden modificar ni eliminar')


class ModeloNumerado(models.Model):
    """
    Base para las entidades que llevan un número visible por colección.

    El número se asigna una sola vez, al insertar la fila, dentro de la misma
    transacción que el INSERT: si el contador falla no se guarda nada.
    """
    COLECCION = None

    numero = models.PositiveIntegerField(unique=True, editable=False)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            return super().save(*args, **kwargs)

        from .numeracion import siguiente_numero

        with transaction.atomic():
            if self.numero is None:
                self.numero = siguiente_numero(self.COLECCION)
            return super().save(*args, **kwargs)


class UsuarioManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError('El nombre de usuario es obligatorio')
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault('role', Usuario.ROL_ADMIN)
        extra_fields.setdefault('permisos', True)
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(username, password, **extra_fields)


class Usuario(ModeloNumerado, AbstractBaseUser, PermissionsMixin):
    COLECCION = 'usuarios'

    ROL_ADMIN = 'admin'
    ROL_USUARIO = 'user'
    ROLES = [
        (ROL_ADMIN, 'Administrador'),
        (ROL_USUARIO, 'Usuario'),
    ]

    # Sensible a mayúsculas: "Alice" y "alice" son cuentas distintas.
    username = models.CharField(max_length=150, unique=True)
    role = models.CharField(max_length=10, choices=ROLES, default=ROL_USUARIO)
    # Independiente del rol; es lo único que se consulta para autorizar.
    permisos = models.BooleanField(default=False)
    # Se guarda escapado; el largo máximo se valida sobre el texto sin escapar.
    nombre = models.TextField(blank=True, default='')
    foto = models.ImageField(upload_to='perfiles/', null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    objects = UsuarioManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ['numero']

    def __str__(self):
        return self.username


class Proyecto(ModeloNumerado):
    COLECCION = 'proyectos'

    nombre = models.TextField()
    descripcion = models.TextField(blank=True, default='')
    creado_por = models.ForeignKey(Usuario, on_delete=models.CASCADE, related_name='proyectos')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['numero']

    def __str__(self):
        return self.nombre


class EstadoTarea(models.TextChoices):
    PENDIENTE = 'Pendiente', 'Pendiente'
    EN_PROGRESO = 'En Progreso', 'En Progreso'
    EN_REVISION = 'En Revisión', 'En Revisión'
    COMPLETADA = 'Completada', 'Completada'
    CANCELADA = 'Cancelada', 'Cancelada'

    @classmethod
    def es_terminal(cls, estado):
        return estado == cls.COMPLETADA


class PrioridadTarea(models.TextChoices):
    BAJA = 'Baja', 'Baja'
    MEDIA = 'Media', 'Media'
    ALTA = 'Alta', 'Alta'
    CRITICA = 'Crítica', 'Crítica'

    @classmethod
    def es_alta(cls, prioridad):
        return prioridad in (cls.ALTA, cls.CRITICA)


class Tarea(ModeloNumerado):
    COLECCION = 'tareas'

    titulo = models.TextField()
    descripcion = models.TextField(blank=True, default='')
    estado = models.CharField(max_length=20, choices=EstadoTarea.choices, default=EstadoTarea.PENDIENTE)
    prioridad = models.CharField(max_length=20, choices=PrioridadTarea.choices, default=PrioridadTarea.MEDIA)
    proyecto = models.ForeignKey(Proyecto, on_delete=models.SET_NULL, null=True, blank=True, related_name='tareas')
    asignado_a = models.ForeignKey(
        Usuario, on_delete=models.SET_NULL, null=True, blank=True, related_name='tareas_asignadas'
    )
    fecha_vencimiento = models.DateField(null=True, blank=True)
    horas_estimadas = models.DecimalField(max_digits=7, decimal_places=2, default=0)
    horas_reales = models.DecimalField(max_digits=7, decimal_places=2, default=0)
    creado_por = models.ForeignKey(Usuario, on_delete=models.CASCADE, related_name='tareas_creadas')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['numero']

    def __str__(self):
        return self.titulo

    def esta_completada(self):
        return EstadoTarea.es_terminal(self.estado)

    def esta_vencida(self):
        """Vencida: tiene fecha pasada y no está completada."""
        if self.fecha_vencimiento and not self.esta_completada():
            return self.fecha_vencimiento < timezone.localdate()
        return False


class Comentario(ModeloNumerado):
    COLECCION = 'comentarios'

    # Referencia simple: los comentarios no se borran junto con la tarea.
    tarea_id = models.PositiveBigIntegerField(db_index=True)
    usuario = models.ForeignKey(Usuario, on_delete=models.PROTECT, related_name='comentarios')
    contenido = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'numero']

    def __str__(self):
        return f'#{self.tarea_id} {self.usuario}'


class HistorialQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise HistorialInmutable()

    def delete(self):
        raise HistorialInmutable()


class Historial(ModeloNumerado):
    COLECCION = 'historial'

    CREADA = 'CREATED'
    ESTADO_CAMBIADO = 'STATUS_CHANGED'
    TITULO_CAMBIADO = 'TITLE_CHANGED'
    ELIMINADA = 'DELETED'
    ACCIONES = [
        (CREADA, 'Creada'),
        (ESTADO_CAMBIADO, 'Estado cambiado'),
        (TITULO_CAMBIADO, 'Título cambiado'),
        (ELIMINADA, 'Eliminada'),
    ]

    # La entrada sobrevive a la tarea, así que no es una ForeignKey.
    tarea_id = models.PositiveBigIntegerField(db_index=True)
    tarea_numero = models.PositiveIntegerField()
    propietario = models.ForeignKey(Usuario, on_delete=models.PROTECT, related_name='+')
    usuario = models.ForeignKey(Usuario, on_delete=models.PROTECT, related_name='historial')
    accion = models.CharField(max_length=20, choices=ACCIONES)
    campo = models.CharField(max_length=300)
    valor_anterior = models.TextField(blank=True, default='')
    valor_nuevo = models.TextField(blank=True, default='')
    timestamp = models.DateTimeField(default=timezone.now)

    objects = HistorialQuerySet.as_manager()

    class Meta:
        ordering = ['timestamp', 'numero']
        verbose_name_plural = 'Historial'

    def __str__(self):
        return f'#{self.tarea_numero} {self.accion}'

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise HistorialInmutable()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise HistorialInmutable()


class Notificacion(ModeloNumerado):
    COLECCION = 'notificaciones'

    TAREA_ASIGNADA = 'task_assigned'
    TAREA_ACTUALIZADA = 'task_updated'

    usuario = models.ForeignKey(Usuario, on_delete=models.CASCADE, related_name='notificaciones')
    mensaje = models.TextField()
    tipo = models.CharField(max_length=50)
    leida = models.BooleanField(default=False)
    enlace = models.CharField(max_length=255, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-numero']

    def __str__(self):
        return f'{self.usuario}: {self.mensaje}'


class Contador(models.Model):
    """Último número entregado para cada colección."""
    coleccion = models.CharField(max_length=50, unique=True)
    valor = models.PositiveBigIntegerField(default=0)

    def __str__(self):
        return f'{self.coleccion}={self.valor}'
