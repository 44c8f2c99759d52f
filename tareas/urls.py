from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    TareaViewSet,
    ProyectoViewSet,
    LoginView,
    RefreshTokenView,
    ReporteAPIView,
    ComentarioAPIView,
    HistorialAPIView,
    NotificacionAPIView,
    MarcarNotificacionesLeidasAPIView,
    UsuarioAPIView,
    CambiarPasswordUsuarioAPIView,
    PerfilAPIView,
    PerfilPasswordAPIView,
)


router = DefaultRouter(trailing_slash=False)
router.register('tasks', TareaViewSet, basename='tarea')
router.register('projects', ProyectoViewSet, basename='proyecto')

# Importante: separar las URLs del router y las personalizadas
custom_urls = [
    path('login', LoginView.as_view(), name='login'),
    path('token/refresh', RefreshTokenView.as_view(), name='token-refresh'),

    path('reports/<str:tipo>', ReporteAPIView.as_view(), name='reportes'),
    path('comments', ComentarioAPIView.as_view(), name='comentarios'),
    path('history', HistorialAPIView.as_view(), name='historial'),
    path('notifications', NotificacionAPIView.as_view(), name='notificaciones'),
    path('notifications/read-all',
         MarcarNotificacionesLeidasAPIView.as_view(),
         name='notificaciones-leidas'),

    path('users', UsuarioAPIView.as_view(), name='usuarios'),
    path('users/<str:username>/password',
         CambiarPasswordUsuarioAPIView.as_view(),
         name='usuario-password'),

    path('profile', PerfilAPIView.as_view(), name='perfil'),
    path('profile/password', PerfilPasswordAPIView.as_view(), name='perfil-password'),
]

urlpatterns = custom_urls + [path('', include(router.urls))]
