# apps/core/admin.py

from django.contrib import admin
from django.utils.html import format_html
from .models import Board, Column, Card, Worker


class ColumnInline(admin.TabularInline):
    model = Column
    extra = 0
    fields = ['position', 'title']
    ordering = ['position']


@admin.register(Board)
class BoardAdmin(admin.ModelAdmin):
    """Admin para boards e suas colunas"""

    list_display = ['title', 'created_at']
    search_fields = ['title', 'description']
    inlines = [ColumnInline]


class LiveFilter(admin.SimpleListFilter):
    """Filtra cards vivos ou excluídos logicamente"""

    title = 'Situação'
    parameter_name = 'situacao'

    def lookups(self, request, model_admin):
        return [('live', 'Ativos'), ('deleted', 'Excluídos')]

    def queryset(self, request, queryset):
        if self.value() == 'live':
            return queryset.live()
        if self.value() == 'deleted':
            return queryset.deleted()
        return queryset


@admin.register(Card)
class CardAdmin(admin.ModelAdmin):
    """Admin de cards, incluindo os excluídos logicamente"""

    list_display = ['title', 'column', 'position', 'cor_badge', 'deadline', 'deleted_at']
    list_filter = [LiveFilter, 'column__board']
    search_fields = ['title', 'description']
    ordering = ['column_id', 'position', 'id']

    def get_queryset(self, request):
        return Card.all_objects.select_related('column__board')

    def cor_badge(self, obj):
        """Exibe a cor de fundo do card"""
        if not obj.background_color:
            return '-'
        return format_html(
            '<span style="background-color: {}; padding: 3px 12px; border-radius: 4px;">&nbsp;</span>',
            obj.background_color
        )

    cor_badge.short_description = 'Cor'


@admin.register(Worker)
class WorkerAdmin(admin.ModelAdmin):
    list_display = ['card_id', 'member_id', 'created_at']
    ordering = ['card_id', 'member_id']
