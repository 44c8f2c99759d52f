from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import ModelViewSet
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
import logging

from . import auditoria, ciclo_vida, notificaciones, reportes
from .contexto import Contexto
from .models import Comentario, Proyecto, Usuario
from .permissions import IsAdminOrBootstrap, IsAdminPermiso
from .serializers import (
    CambioPasswordPropioSerializer,
    CambioPasswordSerializer,
    ComentarioSerializer,
    CrearNotificacionSerializer,
    CustomTokenObtainPairSerializer,
    HistorialSerializer,
    NotificacionSerializer,
    PerfilSerializer,
    ProyectoSerializer,
    RegistroHistorialSerializer,
    RegistroUsuarioSerializer,
    TareaSerializer,
    UsuarioSerializer,
)

logger = logging.getLogger(__name__)


def _entero(valor, mensaje):
    try:
        return int(valor)
    except (TypeError, ValueError):
        raise ValidationError([mensaje])


# Authentication Views
@extend_schema(tags=['Autenticación'])
class LoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        logger.info('Inicio de sesión de %s', response.data['user']['username'])
        return response


@extend_schema(tags=['Autenticación'])
class RefreshTokenView(TokenRefreshView):
    permission_classes = [AllowAny]


# Vistas para CRUD
@extend_schema(tags=['Tareas'])
class TareaViewSet(ModelViewSet):
    """Tareas del usuario autenticado. Las de otros usuarios no existen para él."""
    permission_classes = [IsAuthenticated]
    serializer_class = TareaSerializer
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']

    def get_queryset(self):
        tareas = ciclo_vida.tareas_de(Contexto.desde_request(self.request))
        params = self.request.query_params

        busqueda = params.get('search', '').strip()
        if busqueda:
            tareas = tareas.filter(Q(titulo__icontains=busqueda) | Q(descripcion__icontains=busqueda))
        if params.get('status'):
            tareas = tareas.filter(estado=params['status'])
        if params.get('priority'):
            tareas = tareas.filter(prioridad=params['priority'])
        if params.get('projectId'):
            tareas = tareas.filter(proyecto_id=_entero(params['projectId'], 'ID de proyecto inválido'))
        return tareas

    def get_object(self):
        return ciclo_vida.obtener_tarea(Contexto.desde_request(self.request), self.kwargs['pk'])

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tarea = ciclo_vida.crear_tarea(Contexto.desde_request(request), serializer.validated_data)
        return Response(self.get_serializer(tarea).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        tarea = self.get_object()
        serializer = self.get_serializer(tarea, data=request.data)
        serializer.is_valid(raise_exception=True)
        tarea = ciclo_vida.actualizar_tarea(Contexto.desde_request(request), tarea, serializer.validated_data)
        return Response(self.get_serializer(tarea).data)

    def destroy(self, request, *args, **kwargs):
        tarea = self.get_object()
        ciclo_vida.eliminar_tarea(Contexto.desde_request(request), tarea)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        tareas = ciclo_vida.tareas_de(Contexto.desde_request(request))
        return Response(reportes.estadisticas(tareas))


@extend_schema(tags=['Proyectos'])
class ProyectoViewSet(ModelViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = ProyectoSerializer
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']

    def get_queryset(self):
        return Proyecto.objects.filter(creado_por=self.request.user).select_related('creado_por')

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs['pk'])
        except (Proyecto.DoesNotExist, ValueError, TypeError):
            raise NotFound('Proyecto no encontrado')

    def perform_create(self, serializer):
        proyecto = serializer.save(creado_por=self.request.user)
        logger.info('Proyecto #%s creado por %s', proyecto.numero, self.request.user.username)

    def perform_update(self, serializer):
        proyecto = serializer.save()
        logger.info('Proyecto #%s actualizado por %s', proyecto.numero, self.request.user.username)

    def perform_destroy(self, instance):
        logger.info('Proyecto #%s eliminado por %s', instance.numero, self.request.user.username)
        instance.delete()


@extend_schema(tags=['Reportes'])
class ReporteAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, tipo):
        if tipo not in reportes.TIPOS_REPORTE:
            raise NotFound('Reporte no encontrado')

        contexto = Contexto.desde_request(request)
        data = reportes.reporte(
            tipo,
            list(ciclo_vida.tareas_de(contexto)),
            proyectos=Proyecto.objects.filter(creado_por=request.user),
            usuarios=Usuario.objects.all(),
        )
        return Response(data)


@extend_schema(tags=['Comentarios'])
class ComentarioAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(parameters=[OpenApiParameter('taskId', int, required=True)])
    def get(self, request):
        tarea_id = _entero(request.query_params.get('taskId'), 'ID de tarea requerido')
        tarea = ciclo_vida.obtener_tarea(Contexto.desde_request(request), tarea_id)

        comentarios = Comentario.objects.filter(tarea_id=tarea.pk).select_related('usuario')
        return Response(ComentarioSerializer(comentarios, many=True).data)

    @extend_schema(request=ComentarioSerializer, responses=ComentarioSerializer)
    def post(self, request):
        serializer = ComentarioSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ciclo_vida.obtener_tarea(Contexto.desde_request(request), serializer.validated_data['tarea_id'])
        comentario = serializer.save(usuario=request.user)
        logger.info('Comentario #%s en tarea %s', comentario.numero, comentario.tarea_id)
        return Response(ComentarioSerializer(comentario).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['Historial'])
class HistorialAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(parameters=[OpenApiParameter('taskId', int, required=False)])
    def get(self, request):
        contexto = Contexto.desde_request(request)
        tarea_id = request.query_params.get('taskId')

        if tarea_id:
            entradas = auditoria.historial_de_tarea(contexto, _entero(tarea_id, 'ID de tarea inválido'))
        else:
            entradas = auditoria.historial_reciente(contexto)
        return Response(HistorialSerializer(entradas, many=True).data)

    @extend_schema(request=RegistroHistorialSerializer, responses=HistorialSerializer)
    def post(self, request):
        serializer = RegistroHistorialSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        tarea = ciclo_vida.obtener_tarea(Contexto.desde_request(request), data['taskId'])
        entrada = auditoria.registrar(
            tarea, request.user, data['action'], data['field'], data['oldValue'], data['newValue']
        )
        return Response(HistorialSerializer(entrada).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['Notificaciones'])
class NotificacionAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(parameters=[OpenApiParameter('unread', bool, required=False)])
    def get(self, request):
        if request.query_params.get('unread', '').lower() in ('1', 'true'):
            lista = notificaciones.bandeja(request.user)
        else:
            lista = notificaciones.todas(request.user)
        return Response(NotificacionSerializer(lista, many=True).data)

    @extend_schema(request=CrearNotificacionSerializer, responses=NotificacionSerializer)
    def post(self, request):
        serializer = CrearNotificacionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        notificacion = notificaciones.notificar(data['username'], data['message'], data['type'], data['link'])
        return Response(NotificacionSerializer(notificacion).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['Notificaciones'])
class MarcarNotificacionesLeidasAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request):
        actualizadas = notificaciones.marcar_todas_leidas(request.user)
        return Response({'updated': actualizadas})


@extend_schema(tags=['Usuarios'])
class UsuarioAPIView(APIView):
    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsAdminOrBootstrap()]
        return [IsAuthenticated()]

    def get(self, request):
        return Response(UsuarioSerializer(Usuario.objects.all(), many=True).data)

    @extend_schema(request=RegistroUsuarioSerializer, responses=UsuarioSerializer)
    def post(self, request):
        serializer = RegistroUsuarioSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if not Usuario.objects.exists():
            usuario = serializer.save(role=Usuario.ROL_ADMIN, permisos=True, is_staff=True)
            logger.info('Cuenta inicial de administrador creada: %s', usuario.username)
        else:
            usuario = serializer.save()
            logger.info('Usuario %s creado por %s', usuario.username, request.user.username)
        return Response(serializer.data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['Usuarios'])
class CambiarPasswordUsuarioAPIView(APIView):
    permission_classes = [IsAdminPermiso]

    @extend_schema(request=CambioPasswordSerializer, responses=None)
    def put(self, request, username):
        try:
            usuario = Usuario.objects.get(username=username)
        except Usuario.DoesNotExist:
            raise NotFound('Usuario no encontrado')

        serializer = CambioPasswordSerializer(data=request.data, context={'usuario': usuario})
        serializer.is_valid(raise_exception=True)
        usuario.set_password(serializer.validated_data['password'])
        usuario.save(update_fields=['password', 'updated_at'])

        logger.info('Contraseña de %s restablecida por %s', usuario.username, request.user.username)
        return Response({'message': 'Contraseña actualizada correctamente'})


@extend_schema(tags=['Perfil'])
class PerfilAPIView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(responses=PerfilSerializer)
    def get(self, request):
        return Response(PerfilSerializer(request.user, context={'request': request}).data)

    @extend_schema(request=PerfilSerializer, responses=PerfilSerializer)
    def put(self, request):
        serializer = PerfilSerializer(request.user, data=request.data, partial=True, context={'request': request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info('Perfil de %s actualizado', request.user.username)
        return Response(serializer.data)


@extend_schema(tags=['Perfil'])
class PerfilPasswordAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=CambioPasswordPropioSerializer, responses=None)
    def put(self, request):
        serializer = CambioPasswordPropioSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        request.user.set_password(serializer.validated_data['newPassword'])
        request.user.save(update_fields=['password', 'updated_at'])
        return Response({'message': 'Contraseña actualizada correctamente'})
