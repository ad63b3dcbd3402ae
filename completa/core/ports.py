# completa/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (Repositórios, Gateways)
DEVE seguir para se conectar à camada Core (Casos de Uso).
"""

from typing import Protocol, List, Optional, Callable
from abc import abstractmethod
from datetime import datetime

# Importa as Entidades que definem o Contrato de Dados
from completa.core.entities import Produto, Pedido, Usuario, Endereco
from completa.core.pagamento import SolicitacaoPedidoPagamento, PedidoProvedor, CobrancaPix


# ====================================================================
# 1. REPOSITÓRIOS (Portas de Persistência)
# ====================================================================

class IProdutoRepository(Protocol):
    """Protocolo para a persistência e busca de Produtos."""

    @abstractmethod
    def buscar_por_id(self, produto_id: str) -> Optional[Produto]: ...

    @abstractmethod
    def listar_todos(self) -> List[Produto]: ...

    @abstractmethod
    def salvar(self, produto: Produto) -> Produto: ...

    @abstractmethod
    def deletar(self, produto_id: str): ...

    @abstractmethod
    def assinar(self, callback: Callable[[List[Produto]], None]) -> Callable[[], None]:
        """Entrega o catálogo completo a cada alteração; retorna a função de cancelamento."""
        ...


class IPedidoRepository(Protocol):
    """Protocolo para a persistência e gestão de Pedidos."""

    @abstractmethod
    def salvar(self, pedido: Pedido) -> Pedido:
        """Cria o pedido (com seus itens) ou atualiza status, link e datas de um existente."""
        ...

    @abstractmethod
    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]: ...

    @abstractmethod
    def listar_todos(self, status: Optional[str] = None) -> List[Pedido]: ...

    @abstractmethod
    def assinar(self, callback: Callable[[List[Pedido]], None]) -> Callable[[], None]: ...


class IUsuarioRepository(Protocol):
    """Protocolo para a persistência de perfis de Usuários."""

    @abstractmethod
    def buscar_por_id(self, usuario_id: str) -> Optional[Usuario]: ...

    @abstractmethod
    def salvar(self, usuario: Usuario) -> Usuario: ...


class IArmazenamentoLocal(Protocol):
    """Armazenamento chave/valor do lado do cliente (sessão) para carrinho e lista de desejos."""

    @abstractmethod
    def carregar(self, chave: str) -> Optional[str]: ...

    @abstractmethod
    def salvar(self, chave: str, valor: str): ...


# ====================================================================
# 2. GATEWAYS (Portas de Serviços Externos)
# ====================================================================

class IGatewayPagamento(Protocol):
    """Protocolo para o provedor de pagamento (checkout hospedado e PIX)."""

    @abstractmethod
    def criar_pedido(self, solicitacao: SolicitacaoPedidoPagamento) -> PedidoProvedor: ...

    @abstractmethod
    def criar_cobranca_pix(self, pedido_provedor_id: str, valor: int, expira_em: datetime) -> CobrancaPix: ...


class IConsultaCep(Protocol):
    """Protocolo para a consulta de endereço a partir do CEP."""

    @abstractmethod
    def buscar_endereco(self, cep: str) -> Optional[Endereco]: ...


class IArmazenamentoImagens(Protocol):
    """Protocolo para hospedagem das imagens de produtos."""

    @abstractmethod
    def enviar(self, conteudo_base64: str, nome_arquivo: Optional[str] = None) -> str:
        """Publica a imagem e retorna a URL pública."""
        ...
