# completa/core/dependency_injection.py
"""
Módulo de Injeção de Dependência (DI).
Responsável por instanciar os Use Cases com suas dependências de Repositórios/Gateways
concretos da camada de Infraestrutura.
"""
from functools import partial

from django.conf import settings

from completa.infrastructure import instances
from completa.infrastructure.armazenamento import ArmazenamentoSessaoDjango
from .frete import calcular_frete, obter_sobretaxa
from .use_cases import (
    ConsultarCepUseCase,
    CotarFreteUseCase,
    EnviarImagemProdutoUseCase,
    GerenciarCarrinhoUseCase,
    GerenciarListaDesejosUseCase,
    GerenciarPedidosAdminUseCase,
    GerenciarProdutosAdminUseCase,
    IniciarCheckoutUseCase,
    ListarProdutosUseCase,
    RegistrarPedidoWhatsappUseCase,
    SincronizarUsuarioUseCase,
)


def get_calculadora_frete():
    """Cotação com a política de sobretaxa definida em FRETE_SOBRETAXA."""
    return partial(calcular_frete, sobretaxa=obter_sobretaxa(settings.FRETE_SOBRETAXA))


# ====================================================================
# Use Cases de Catálogo/Administração
# ====================================================================

def get_listar_produtos_use_case() -> ListarProdutosUseCase:
    return ListarProdutosUseCase(instances.produto_repo)

def get_gerenciar_produtos_admin_use_case() -> GerenciarProdutosAdminUseCase:
    return GerenciarProdutosAdminUseCase(instances.produto_repo)

def get_enviar_imagem_use_case() -> EnviarImagemProdutoUseCase:
    return EnviarImagemProdutoUseCase(instances.armazenamento_imagens)

def get_gerenciar_pedidos_admin_use_case() -> GerenciarPedidosAdminUseCase:
    return GerenciarPedidosAdminUseCase(instances.pedido_repo)

def get_sincronizar_usuario_use_case() -> SincronizarUsuarioUseCase:
    return SincronizarUsuarioUseCase(instances.usuario_repo)


# ====================================================================
# Use Cases de Vendas/Carrinho
# ====================================================================

def get_gerenciar_carrinho_use_case(session) -> GerenciarCarrinhoUseCase:
    return GerenciarCarrinhoUseCase(ArmazenamentoSessaoDjango(session))

def get_gerenciar_lista_desejos_use_case(session) -> GerenciarListaDesejosUseCase:
    return GerenciarListaDesejosUseCase(ArmazenamentoSessaoDjango(session))

def get_cotar_frete_use_case() -> CotarFreteUseCase:
    return CotarFreteUseCase(get_calculadora_frete())

def get_consultar_cep_use_case() -> ConsultarCepUseCase:
    return ConsultarCepUseCase(instances.consulta_cep)

def get_iniciar_checkout_use_case() -> IniciarCheckoutUseCase:
    return IniciarCheckoutUseCase(
        pedido_repo=instances.pedido_repo,
        pagamento_gateway=instances.pagamento_gateway,
        calcular_frete=get_calculadora_frete(),
    )

def get_registrar_pedido_whatsapp_use_case() -> RegistrarPedidoWhatsappUseCase:
    return RegistrarPedidoWhatsappUseCase(
        pedido_repo=instances.pedido_repo,
        calcular_frete=get_calculadora_frete(),
        numero_loja=settings.LOJA_WHATSAPP,
    )
