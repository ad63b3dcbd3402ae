"""
Contrato tipado entre o checkout e o provedor de pagamento.

As solicitações são montadas pelo caso de uso e as respostas do provedor são
validadas na fronteira (gateway) antes de chegarem aqui. Valores monetários
trafegam em centavos.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union

from completa.core.entities import MetodoPagamento, Pedido

# Ordem de preferência do link de redirecionamento no checkout hospedado
PREFERENCIA_LINKS = ('PAY', 'CHECKOUT')


@dataclass(frozen=True)
class TelefonePagamento:
    pais: str
    area: str
    numero: str
    tipo: str = 'MOBILE'


@dataclass(frozen=True)
class ClientePagamento:
    nome: str
    email: str
    cpf: str
    telefones: Tuple[TelefonePagamento, ...]


@dataclass(frozen=True)
class ItemPagamento:
    referencia: str
    nome: str
    quantidade: int
    valor_unitario: int

    @property
    def valor_total(self) -> int:
        return self.valor_unitario * self.quantidade


@dataclass(frozen=True)
class EnderecoPagamento:
    rua: str
    numero: str
    complemento: str
    bairro: str
    cidade: str
    estado: str
    cep: str
    pais: str = 'BRA'


@dataclass(frozen=True)
class SolicitacaoPedidoPagamento:
    referencia: str
    cliente: ClientePagamento
    itens: Tuple[ItemPagamento, ...]
    valor_frete: int
    endereco_entrega: EnderecoPagamento
    metodo: MetodoPagamento
    urls_notificacao: Tuple[str, ...] = ()

    @property
    def valor_itens(self) -> int:
        return sum(item.valor_total for item in self.itens)

    @property
    def valor_total(self) -> int:
        return self.valor_itens + self.valor_frete


@dataclass(frozen=True)
class LinkProvedor:
    rel: str
    href: str
    media: Optional[str] = None


@dataclass(frozen=True)
class PedidoProvedor:
    """Pedido criado no provedor: identificador e links rotulados por relação."""
    id: str
    links: Tuple[LinkProvedor, ...] = ()

    def link_redirecionamento(self) -> Optional[str]:
        """Prefere 'PAY', depois 'CHECKOUT', depois o primeiro link presente."""
        for rel in PREFERENCIA_LINKS:
            link = next((l for l in self.links if l.rel.upper() == rel), None)
            if link:
                return link.href
        if self.links:
            return self.links[0].href
        return None


@dataclass(frozen=True)
class CobrancaPix:
    id: str
    codigo: str
    qr_code_url: Optional[str]
    expira_em: Optional[datetime]

# ====================================================================
# RESULTADO DO CHECKOUT (união rotulada)
# ====================================================================

@dataclass(frozen=True)
class ResultadoCheckoutHospedado:
    """Cartão ou boleto: o cliente é redirecionado para a página do provedor."""
    pedido: Pedido
    url_redirecionamento: str
    tipo: str = 'REDIRECIONAMENTO'


@dataclass(frozen=True)
class ResultadoCheckoutPix:
    """PIX: código copia-e-cola e QR Code com validade."""
    pedido: Pedido
    codigo: str
    qr_code_url: Optional[str]
    expira_em: datetime
    tipo: str = 'PIX'


ResultadoCheckout = Union[ResultadoCheckoutHospedado, ResultadoCheckoutPix]
