"""
Módulo de inicialização dos repositórios e gateways.
Deve ser importado somente depois que o Django estiver configurado.
"""
from django.db import transaction
from django.db.models.signals import post_delete, post_save

from .gateways import GitHubImagemGateway, PagBankGateway, ViaCepGateway
from .repositories import (
    PedidoRepositoryDjango as PedidoRepository,
    ProdutoRepositoryDjango as ProdutoRepository,
    UsuarioRepositoryDjango as UsuarioRepository,
)

# Instâncias globais dos repositórios
produto_repo = ProdutoRepository()
pedido_repo = PedidoRepository()
usuario_repo = UsuarioRepository()

# Instâncias globais dos gateways
pagamento_gateway = PagBankGateway()
consulta_cep = ViaCepGateway()
armazenamento_imagens = GitHubImagemGateway()


# ====================================================================
# Sinais: publicam o snapshot para os assinantes após o commit
# ====================================================================

def _produto_alterado(sender, **kwargs):
    transaction.on_commit(produto_repo.publicar_alteracao)


def _pedido_alterado(sender, **kwargs):
    transaction.on_commit(pedido_repo.publicar_alteracao)


def conectar_sinais():
    for sinal in (post_save, post_delete):
        sinal.connect(_produto_alterado, sender='catalog.Produto', dispatch_uid=f'produto_{id(sinal)}')
        sinal.connect(_pedido_alterado, sender='vendas.Pedido', dispatch_uid=f'pedido_{id(sinal)}')
