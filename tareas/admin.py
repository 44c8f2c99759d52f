from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import Comentario, Historial, Notificacion, Proyecto, Tarea, Usuario


@admin.register(Usuario)
class UsuarioAdmin(UserAdmin):
    list_display = ['numero', 'username', 'nombre', 'role', 'permisos', 'is_active']
    list_filter = ['role', 'permisos', 'is_active']
    search_fields = ['username', 'nombre']
    ordering = ['numero']
    readonly_fields = ['numero', 'created_at', 'updated_at', 'last_login']
    fieldsets = (
        (None, {'fields': ('numero', 'username', 'password')}),
        ('Perfil', {'fields': ('nombre', 'foto')}),
        ('Permisos', {'fields': ('role', 'permisos', 'is_active', 'is_staff', 'is_superuser')}),
        ('Fechas', {'fields': ('last_login', 'created_at', 'updated_at')}),
    )
    add_fieldsets = (
        (None, {'fields': ('username', 'password1', 'password2', 'role', 'permisos')}),
    )


@admin.register(Proyecto)
class ProyectoAdmin(admin.ModelAdmin):
    list_display = ['numero', 'nombre', 'creado_por', 'created_at']
    search_fields = ['nombre']


@admin.register(Tarea)
class TareaAdmin(admin.ModelAdmin):
    list_display = ['numero', 'titulo', 'estado', 'prioridad', 'asignado_a', 'creado_por', 'fecha_vencimiento']
    list_filter = ['estado', 'prioridad']
    search_fields = ['titulo', 'descripcion']


@admin.register(Comentario)
class ComentarioAdmin(admin.ModelAdmin):
    list_display = ['numero', 'tarea_id', 'usuario', 'created_at']


@admin.register(Historial)
class HistorialAdmin(admin.ModelAdmin):
    """Sólo lectura: el historial no se edita ni se borra."""
    list_display = ['numero', 'tarea_numero', 'accion', 'campo', 'usuario', 'timestamp']
    list_filter = ['accion']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Notificacion)
class NotificacionAdmin(admin.ModelAdmin):
    list_display = ['numero', 'usuario', 'tipo', 'leida', 'created_at']
    list_filter = ['tipo', 'leida']
