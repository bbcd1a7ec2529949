# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Sum
from django.utils.html import format_html

from .models import (
    Usuario, Corretor, EtapaProcesso, Venda, TarefaCorretor,
    HistoricoTarefa, MetaMensal
)
from .utils import formatar_moeda


def _badge(cor, texto):
    return format_html(
        '<span style="background-color: {}; color: white; '
        'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
        cor, texto
    )


@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    """Admin customizado para o modelo Usuario"""

    list_display = ['username', 'email', 'get_full_name', 'tipo_badge', 'is_active', 'date_joined']
    list_filter = ['tipo', 'is_staff', 'is_active', 'date_joined']
    search_fields = ['username', 'first_name', 'last_name', 'email']
    ordering = ['-date_joined']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Informações Adicionais', {'fields': ('tipo', 'telefone')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Informações Adicionais', {'fields': ('tipo', 'telefone')}),
    )

    def tipo_badge(self, obj):
        cores = {
            'admin': '#EF4444',
            'diretor': '#A855F7',
            'gerente': '#F59E0B',
            'corretor': '#3B82F6',
        }
        return _badge(cores.get(obj.tipo, '#6B7280'), obj.get_tipo_display())

    tipo_badge.short_description = 'Tipo'


@admin.register(Corretor)
class CorretorAdmin(admin.ModelAdmin):
    list_display = ['nome', 'email', 'status', 'status_kanban', 'usuario', 'criado_em']
    list_filter = ['status', 'status_kanban']
    search_fields = ['nome', 'email']
    raw_id_fields = ['usuario']


@admin.register(EtapaProcesso)
class EtapaProcessoAdmin(admin.ModelAdmin):
    list_display = ['titulo', 'cor_badge', 'ordem', 'padrao']
    list_editable = ['ordem']
    ordering = ['ordem']

    def cor_badge(self, obj):
        return _badge(obj.cor, obj.cor)

    cor_badge.short_description = 'Cor'


@admin.register(Venda)
class VendaAdmin(admin.ModelAdmin):
    list_display = ['cliente', 'imovel', 'corretor', 'vgv_formatado', 'status', 'etapa', 'data_venda']
    list_filter = ['status', 'etapa', 'data_venda']
    search_fields = ['cliente', 'imovel', 'corretor__nome']
    date_hierarchy = 'data_venda'
    readonly_fields = ['criado_em', 'atualizado_em']

    def vgv_formatado(self, obj):
        return formatar_moeda(obj.vgv)

    vgv_formatado.short_description = 'VGV'


class HistoricoTarefaInline(admin.TabularInline):
    model = HistoricoTarefa
    extra = 0
    readonly_fields = ['acao', 'valor_anterior', 'valor_novo', 'usuario', 'criado_em']
    can_delete = False


@admin.register(TarefaCorretor)
class TarefaCorretorAdmin(admin.ModelAdmin):
    list_display = ['titulo', 'corretor', 'coluna', 'prioridade', 'prazo', 'concluida_em']
    list_filter = ['coluna', 'prioridade', 'corretor']
    search_fields = ['titulo', 'descricao', 'referencia_imovel']
    readonly_fields = ['concluida_em', 'criado_em', 'atualizado_em']
    inlines = [HistoricoTarefaInline]


@admin.register(MetaMensal)
class MetaMensalAdmin(admin.ModelAdmin):
    list_display = ['ano', 'mes', 'valor_formatado', 'atualizado_em']
    list_filter = ['ano']
    ordering = ['-ano', 'mes']

    def valor_formatado(self, obj):
        return formatar_moeda(obj.valor_meta)

    valor_formatado.short_description = 'Meta'

    def changelist_view(self, request, extra_context=None):
        """Mostra a meta anual (soma dos meses) do ano filtrado"""
        extra_context = extra_context or {}
        ano = request.GET.get('ano__exact')
        if ano:
            total = MetaMensal.objects.filter(ano=ano).aggregate(total=Sum('valor_meta'))['total']
            extra_context['subtitle'] = f"Meta anual {ano}: {formatar_moeda(total or 0)}"
        return super().changelist_view(request, extra_context=extra_context)
