from collections.abc import Mapping

from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework.settings import api_settings
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .exceptions import mensajes_de
from .models import (
    Comentario,
    EstadoTarea,
    Historial,
    Notificacion,
    PrioridadTarea,
    Proyecto,
    Tarea,
    Usuario,
)
from .token import CustomRefreshToken
from .validacion import limpiar_texto, parsear_fecha, validar_proyecto, validar_tarea

# Valores que el cliente manda para "sin proyecto" / "sin asignar".
VALORES_VACIOS = ('', 0, '0', None)


def _copiar(data):
    return {clave: data.get(clave) for clave in data}


def _reunir_errores(errores, exc):
    """Une los errores de reglas de negocio con los de los campos, sin repetir."""
    for mensaje in mensajes_de(exc.detail):
        if mensaje not in errores:
            errores.append(mensaje)
    return serializers.ValidationError({api_settings.NON_FIELD_ERRORS_KEY: errores})


class UsuarioSerializer(serializers.ModelSerializer):
    displayName = serializers.CharField(source='nombre', read_only=True)
    photo = serializers.ImageField(source='foto', read_only=True)

    class Meta:
        model = Usuario
        fields = ['id', 'numero', 'username', 'role', 'permisos', 'displayName', 'photo']
        read_only_fields = fields


class RegistroUsuarioSerializer(serializers.ModelSerializer):
    # Declarado a mano para que la unicidad la reporte validate_username.
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    displayName = serializers.CharField(source='nombre', required=False, allow_blank=True, max_length=100)

    class Meta:
        model = Usuario
        fields = ['id', 'numero', 'username', 'password', 'role', 'permisos', 'displayName']
        read_only_fields = ['id', 'numero']

    def validate_username(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('El nombre de usuario es requerido')
        if Usuario.objects.filter(username=value).exists():
            raise serializers.ValidationError('El nombre de usuario ya existe')
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate_displayName(self, value):
        return limpiar_texto(value)

    def create(self, validated_data):
        password = validated_data.pop('password')
        return Usuario.objects.create_user(password=password, **validated_data)

    def to_representation(self, instance):
        return UsuarioSerializer(instance, context=self.context).data


class CambioPasswordSerializer(serializers.Serializer):
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_password(self, value):
        validate_password(value, user=self.context.get('usuario'))
        return value


class CambioPasswordPropioSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(write_only=True, trim_whitespace=False)
    newPassword = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_currentPassword(self, value):
        usuario = self.context['request'].user
        if not usuario.check_password(value):
            raise serializers.ValidationError('La contraseña actual no es correcta')
        return value

    def validate_newPassword(self, value):
        validate_password(value, user=self.context['request'].user)
        return value


class PerfilSerializer(serializers.ModelSerializer):
    displayName = serializers.CharField(source='nombre', required=False, allow_blank=True, max_length=100)
    photo = serializers.ImageField(source='foto', required=False, allow_null=True)

    class Meta:
        model = Usuario
        fields = ['id', 'numero', 'username', 'role', 'permisos', 'displayName', 'photo']
        read_only_fields = ['id', 'numero', 'username', 'role', 'permisos']

    def validate_displayName(self, value):
        return limpiar_texto(value)


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Login: valida usuario y contraseña y entrega el token de acceso junto con
    los datos básicos del usuario. El mismo mensaje cubre usuario inexistente,
    contraseña incorrecta y cuenta inactiva.
    """
    token_class = CustomRefreshToken

    default_error_messages = {
        'no_active_account': 'Credenciales inválidas',
    }

    def validate(self, attrs):
        data = super().validate(attrs)
        return {
            'token': data['access'],
            'refresh': data['refresh'],
            'user': {
                'username': self.user.username,
                'role': self.user.role,
                'permisos': self.user.permisos,
                'displayName': self.user.nombre,
            },
        }


class ProyectoSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='nombre', required=False, allow_blank=True)
    description = serializers.CharField(source='descripcion', required=False, allow_blank=True, default='')
    createdBy = serializers.SlugRelatedField(source='creado_por', slug_field='username', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Proyecto
        fields = ['id', 'numero', 'name', 'description', 'createdBy', 'createdAt', 'updatedAt']
        read_only_fields = ['id', 'numero']

    def to_internal_value(self, data):
        if not isinstance(data, Mapping):
            return super().to_internal_value(data)
        errores = validar_proyecto({'nombre': data.get('name')})
        try:
            attrs = super().to_internal_value(data)
        except serializers.ValidationError as exc:
            raise _reunir_errores(errores, exc)
        if errores:
            raise serializers.ValidationError({api_settings.NON_FIELD_ERRORS_KEY: errores})

        attrs['nombre'] = limpiar_texto(attrs.get('nombre'))
        attrs['descripcion'] = limpiar_texto(attrs.get('descripcion'))
        return attrs


class TareaSerializer(serializers.ModelSerializer):
    title = serializers.CharField(source='titulo', required=False, allow_blank=True)
    description = serializers.CharField(source='descripcion', required=False, allow_blank=True, default='')
    status = serializers.CharField(
        source='estado', required=False, allow_blank=True, default=EstadoTarea.PENDIENTE
    )
    priority = serializers.CharField(
        source='prioridad', required=False, allow_blank=True, default=PrioridadTarea.MEDIA
    )
    projectId = serializers.PrimaryKeyRelatedField(
        source='proyecto',
        queryset=Proyecto.objects.none(),
        required=False,
        allow_null=True,
        default=None,
        error_messages={
            'does_not_exist': 'El proyecto no existe',
            'incorrect_type': 'El proyecto no existe',
        },
    )
    assignedTo = serializers.SlugRelatedField(
        source='asignado_a',
        slug_field='username',
        queryset=Usuario.objects.filter(is_active=True),
        required=False,
        allow_null=True,
        default=None,
        error_messages={
            'does_not_exist': 'El usuario asignado no existe',
            'invalid': 'El usuario asignado no existe',
        },
    )
    dueDate = serializers.CharField(
        source='fecha_vencimiento', required=False, allow_blank=True, allow_null=True, default=None
    )
    estimatedHours = serializers.DecimalField(
        source='horas_estimadas',
        max_digits=7,
        decimal_places=2,
        required=False,
        allow_null=True,
        default=0,
        coerce_to_string=False,
    )
    actualHours = serializers.DecimalField(
        source='horas_reales',
        max_digits=7,
        decimal_places=2,
        required=False,
        coerce_to_string=False,
    )
    createdBy = serializers.SlugRelatedField(source='creado_por', slug_field='username', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    isCompleted = serializers.SerializerMethodField()
    isOverdue = serializers.SerializerMethodField()

    class Meta:
        model = Tarea
        fields = [
            'id',
            'numero',
            'title',
            'description',
            'status',
            'priority',
            'projectId',
            'assignedTo',
            'dueDate',
            'estimatedHours',
            'actualHours',
            'createdBy',
            'createdAt',
            'updatedAt',
            'isCompleted',
            'isOverdue',
        ]
        read_only_fields = ['id', 'numero']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Sólo se puede enlazar una tarea a proyectos propios.
        request = self.context.get('request')
        if request is not None and request.user.is_authenticated:
            self.fields['projectId'].queryset = Proyecto.objects.filter(creado_por=request.user)

    def get_isCompleted(self, obj):
        return obj.esta_completada()

    def get_isOverdue(self, obj):
        return obj.esta_vencida()

    def to_internal_value(self, data):
        if not isinstance(data, Mapping):
            return super().to_internal_value(data)
        datos = _copiar(data)
        for clave in ('projectId', 'assignedTo'):
            if clave in datos and datos[clave] in VALORES_VACIOS:
                datos[clave] = None
        if datos.get('estimatedHours') == '':
            datos['estimatedHours'] = None
        if datos.get('actualHours') in ('', None):
            datos.pop('actualHours', None)

        errores = validar_tarea({
            'titulo': datos.get('title'),
            'fecha_vencimiento': datos.get('dueDate'),
            'horas_estimadas': datos.get('estimatedHours'),
            'horas_reales': datos.get('actualHours'),
            'estado': datos.get('status'),
            'prioridad': datos.get('priority'),
        })
        try:
            attrs = super().to_internal_value(datos)
        except serializers.ValidationError as exc:
            raise _reunir_errores(errores, exc)
        if errores:
            raise serializers.ValidationError({api_settings.NON_FIELD_ERRORS_KEY: errores})

        attrs['titulo'] = limpiar_texto(attrs.get('titulo'))
        attrs['descripcion'] = limpiar_texto(attrs.get('descripcion'))
        attrs['estado'] = attrs.get('estado') or EstadoTarea.PENDIENTE
        attrs['prioridad'] = attrs.get('prioridad') or PrioridadTarea.MEDIA
        attrs['fecha_vencimiento'] = parsear_fecha(attrs.get('fecha_vencimiento'))
        if attrs.get('horas_estimadas') is None:
            attrs['horas_estimadas'] = 0
        return attrs


class ComentarioSerializer(serializers.ModelSerializer):
    taskId = serializers.IntegerField(
        source='tarea_id', error_messages={'required': 'ID de tarea requerido', 'invalid': 'ID de tarea requerido'}
    )
    user = serializers.SlugRelatedField(source='usuario', slug_field='username', read_only=True)
    content = serializers.CharField(
        source='contenido', allow_blank=True, error_messages={'required': 'El comentario no puede estar vacío'}
    )
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Comentario
        fields = ['id', 'numero', 'taskId', 'user', 'content', 'createdAt']
        read_only_fields = ['id', 'numero']

    def validate_content(self, value):
        value = limpiar_texto(value)
        if not value:
            raise serializers.ValidationError('El comentario no puede estar vacío')
        return value


class HistorialSerializer(serializers.ModelSerializer):
    taskId = serializers.IntegerField(source='tarea_id', read_only=True)
    taskNumber = serializers.IntegerField(source='tarea_numero', read_only=True)
    user = serializers.SlugRelatedField(source='usuario', slug_field='username', read_only=True)
    action = serializers.CharField(source='accion', read_only=True)
    field = serializers.CharField(source='campo', read_only=True)
    oldValue = serializers.CharField(source='valor_anterior', read_only=True)
    newValue = serializers.CharField(source='valor_nuevo', read_only=True)

    class Meta:
        model = Historial
        fields = [
            'id', 'numero', 'taskId', 'taskNumber', 'user', 'action', 'field', 'oldValue', 'newValue', 'timestamp'
        ]
        read_only_fields = fields


class RegistroHistorialSerializer(serializers.Serializer):
    taskId = serializers.IntegerField(error_messages={'required': 'ID de tarea requerido'})
    action = serializers.ChoiceField(choices=Historial.ACCIONES)
    field = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    oldValue = serializers.CharField(required=False, allow_blank=True, default='')
    newValue = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_field(self, value):
        return limpiar_texto(value)

    def validate_oldValue(self, value):
        return limpiar_texto(value)

    def validate_newValue(self, value):
        return limpiar_texto(value)


class NotificacionSerializer(serializers.ModelSerializer):
    user = serializers.SlugRelatedField(source='usuario', slug_field='username', read_only=True)
    message = serializers.CharField(source='mensaje', read_only=True)
    type = serializers.CharField(source='tipo', read_only=True)
    read = serializers.BooleanField(source='leida', read_only=True)
    link = serializers.CharField(source='enlace', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Notificacion
        fields = ['id', 'numero', 'user', 'message', 'type', 'read', 'link', 'createdAt']
        read_only_fields = fields


class CrearNotificacionSerializer(serializers.Serializer):
    username = serializers.SlugRelatedField(
        slug_field='username',
        queryset=Usuario.objects.filter(is_active=True),
        error_messages={'does_not_exist': 'El usuario destinatario no existe'},
    )
    message = serializers.CharField(allow_blank=True)
    type = serializers.CharField(max_length=50, required=False, allow_blank=True, default='info')
    link = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')

    def validate_message(self, value):
        value = limpiar_texto(value)
        if not value:
            raise serializers.ValidationError('El mensaje es requerido')
        return value
