# Configuração da interface administrativa do Django para os modelos da Completa.

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from completa.catalog.models import Produto
from completa.core import dependency_injection as di
from completa.core.entities import StatusPedido
from completa.core.exceptions import BaseErroCore
from completa.infrastructure.models import Usuario
from completa.vendas.models import ItemPedido, Pedido

# ====================================================================
# 1. ADMIN PERSONALIZADO PARA USUÁRIOS
# ====================================================================

@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    """Customização do modelo Usuario. Usa email/senha e expõe o papel na loja."""

    list_display = ('email', 'first_name', 'last_name', 'papel', 'is_staff', 'is_active')
    list_filter = ('papel', 'is_staff', 'is_active')

    # O campo 'username' não existe no modelo Usuario
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Informações de Perfil', {'fields': ('first_name', 'last_name', 'foto_url', 'papel')}),
        ('Permissões', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Datas', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2', 'papel'),
        }),
    )
    search_fields = ('email', 'first_name', 'last_name')
    ordering = ('email',)


# ====================================================================
# 2. ADMIN PARA PRODUTOS
# ====================================================================

@admin.register(Produto)
class ProdutoAdmin(admin.ModelAdmin):
    list_display = ('nome', 'preco_formatado', 'preco_promocional', 'estoque', 'categoria', 'ativo', 'lancamento', 'mais_vendido')
    list_filter = ('ativo', 'lancamento', 'mais_vendido', 'categoria')
    search_fields = ('nome', 'descricao', 'id')
    ordering = ('-data_criacao',)
    fieldsets = (
        ('Informações Básicas', {
            'fields': ('nome', 'descricao', 'preco', 'preco_promocional', 'estoque', 'imagem_url')
        }),
        ('Classificação', {
            'fields': ('categoria', 'marca', 'tamanhos', 'cores'),
        }),
        ('Logística', {
            'fields': ('peso_kg', 'comprimento_cm', 'largura_cm', 'altura_cm'),
        }),
        ('Vitrine', {
            'fields': ('ativo', 'lancamento', 'mais_vendido', 'vendidos'),
        }),
    )


# ====================================================================
# 3. ADMIN PARA PEDIDOS
# ====================================================================

class ItemPedidoInline(admin.TabularInline):
    """Exibe os itens comprados dentro do detalhe do Pedido."""
    model = ItemPedido
    readonly_fields = ('produto_id', 'nome_produto', 'preco_unitario', 'quantidade', 'tamanho', 'cor', 'subtotal')
    extra = 0
    can_delete = False


def _acao_status(status: StatusPedido):
    """Cria uma ação em lote que passa pelo caso de uso (data de pagamento incluída)."""

    def acao(modeladmin, request, queryset):
        pedidos_uc = di.get_gerenciar_pedidos_admin_use_case()
        atualizados = 0
        for pedido_id in queryset.values_list('pk', flat=True):
            try:
                pedidos_uc.atualizar_status_manual(pedido_id, status.value)
                atualizados += 1
            except BaseErroCore as e:
                modeladmin.message_user(request, f"Pedido #{pedido_id}: {e.message}", messages.ERROR)
        modeladmin.message_user(request, f"{atualizados} pedido(s) marcado(s) como '{status.value}'.")

    acao.__name__ = f'marcar_{status.value}'
    acao.short_description = f"Marcar como {status.value.replace('_', ' ')}"
    return acao


@admin.register(Pedido)
class PedidoAdmin(admin.ModelAdmin):
    list_display = ('id', 'nome_cliente', 'data_criacao', 'total', 'status', 'metodo_pagamento', 'metodo_entrega')
    list_filter = ('status', 'metodo_pagamento', 'metodo_entrega', 'data_criacao')
    search_fields = ('id', 'nome_cliente', 'email_cliente', 'cidade_entrega')
    date_hierarchy = 'data_criacao'
    inlines = [ItemPedidoInline]
    actions = [_acao_status(s) for s in StatusPedido]

    # O status muda pelas ações; somente o link de pagamento é editável
    readonly_fields = (
        'id', 'usuario_id', 'status', 'data_criacao', 'data_pagamento',
        'subtotal', 'servico_frete', 'preco_frete', 'prazo_frete', 'frete_gratis', 'total',
        'metodo_entrega', 'metodo_pagamento', 'pedido_provedor_id',
        'nome_cliente', 'email_cliente', 'telefone_cliente', 'cpf_cliente',
        'cep_entrega', 'rua_entrega', 'numero_entrega', 'complemento_entrega',
        'bairro_entrega', 'cidade_entrega', 'estado_entrega',
    )

    def has_add_permission(self, request):
        """Impedir a criação de pedidos pela interface do Admin."""
        return False
