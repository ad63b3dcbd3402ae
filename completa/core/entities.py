from dataclasses import dataclass, field, asdict
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple
import uuid

from completa.core.exceptions import PrecoPromocionalInvalidoError, QuantidadeInvalidaError

CENTAVO = Decimal('0.01')


def agora() -> datetime:
    """Relógio padrão do domínio (UTC, com fuso)."""
    return datetime.now(timezone.utc)


def para_decimal(valor) -> Decimal:
    if isinstance(valor, Decimal):
        return valor
    return Decimal(str(valor))


def quantizar(valor) -> Decimal:
    """Arredonda para a precisão de centavos (meio para cima)."""
    return para_decimal(valor).quantize(CENTAVO, rounding=ROUND_HALF_UP)


def para_centavos(valor) -> int:
    return int((para_decimal(valor) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def gerar_id() -> str:
    return str(uuid.uuid4())

# ====================================================================
# ENUMERAÇÕES
# ====================================================================

class StatusPedido(str, Enum):
    AGUARDANDO_PAGAMENTO = 'aguardando_pagamento'
    PAGO = 'pago'
    CANCELADO = 'cancelado'
    ENVIADO = 'enviado'


class MetodoEntrega(str, Enum):
    ENTREGA = 'ENTREGA'
    RETIRADA = 'RETIRADA'


class MetodoPagamento(str, Enum):
    CARTAO = 'CARTAO'
    BOLETO = 'BOLETO'
    PIX = 'PIX'
    # Pedido registrado para finalização manual pelo WhatsApp da loja
    WHATSAPP = 'WHATSAPP'

# ====================================================================
# ENTIDADES CORE
# Representam os objetos de negócio puros.
# ====================================================================

@dataclass
class Usuario:
    """Perfil do usuário autenticado. O papel 'admin' é atribuído fora da aplicação."""
    nome: str
    email: str
    papel: str = 'user'
    foto_url: Optional[str] = None
    id: str = field(default_factory=gerar_id)

    PAPEIS = ('user', 'admin')

    @property
    def eh_admin(self) -> bool:
        return self.papel == 'admin'


@dataclass
class Produto:
    """Produto do catálogo (peça de roupa) com variações de tamanho e cor."""
    nome: str
    preco: Decimal
    descricao: str = ''
    preco_promocional: Optional[Decimal] = None
    categoria: str = ''
    marca: Optional[str] = None
    imagem_url: str = ''
    tamanhos: List[str] = field(default_factory=list)
    cores: List[str] = field(default_factory=list)
    estoque: int = 0
    peso_kg: Decimal = Decimal('0')
    comprimento_cm: Decimal = Decimal('0')
    largura_cm: Decimal = Decimal('0')
    altura_cm: Decimal = Decimal('0')
    ativo: bool = True
    lancamento: bool = False
    mais_vendido: bool = False
    vendidos: int = 0
    id: str = field(default_factory=gerar_id)
    data_criacao: datetime = field(default_factory=agora)
    data_atualizacao: Optional[datetime] = None

    def __post_init__(self):
        self.preco = para_decimal(self.preco)
        self.peso_kg = para_decimal(self.peso_kg)
        # Promoção zerada equivale a "sem promoção"
        if self.preco_promocional is not None:
            self.preco_promocional = para_decimal(self.preco_promocional)
            if self.preco_promocional <= 0:
                self.preco_promocional = None
        if self.preco_promocional is not None and self.preco_promocional >= self.preco:
            raise PrecoPromocionalInvalidoError(
                f"Preço promocional {self.preco_promocional} deve ser menor que o preço {self.preco}."
            )
        self.tamanhos = list(dict.fromkeys(self.tamanhos))
        self.cores = list(dict.fromkeys(self.cores))

    @property
    def preco_final(self) -> Decimal:
        """Preço cobrado: o promocional quando existir, senão o preço base."""
        if self.preco_promocional:
            return self.preco_promocional
        return self.preco

    @property
    def desconto(self) -> Decimal:
        """Fração de desconto (0 a 1) usada na ordenação da vitrine."""
        if not self.preco_promocional or not self.preco:
            return Decimal('0')
        return (self.preco - self.preco_promocional) / self.preco

    def para_dict(self) -> dict:
        dados = asdict(self)
        for campo in ('preco', 'preco_promocional', 'peso_kg', 'comprimento_cm', 'largura_cm', 'altura_cm'):
            if dados[campo] is not None:
                dados[campo] = str(dados[campo])
        dados['data_criacao'] = self.data_criacao.isoformat()
        dados['data_atualizacao'] = self.data_atualizacao.isoformat() if self.data_atualizacao else None
        return dados

    @classmethod
    def de_dict(cls, dados: dict) -> 'Produto':
        dados = dict(dados)
        for campo in ('comprimento_cm', 'largura_cm', 'altura_cm'):
            if dados.get(campo) is not None:
                dados[campo] = para_decimal(dados[campo])
        if dados.get('data_criacao'):
            dados['data_criacao'] = datetime.fromisoformat(dados['data_criacao'])
        else:
            dados.pop('data_criacao', None)
        if dados.get('data_atualizacao'):
            dados['data_atualizacao'] = datetime.fromisoformat(dados['data_atualizacao'])
        return cls(**dados)


@dataclass
class ItemCarrinho:
    """Linha do carrinho: snapshot do produto + tamanho, cor e quantidade."""
    produto: Produto
    quantidade: int
    tamanho: str
    cor: str

    @property
    def chave(self) -> Tuple[str, str, str]:
        return (self.produto.id, self.tamanho, self.cor)

    @property
    def preco_unitario(self) -> Decimal:
        return self.produto.preco_final

    @property
    def subtotal(self) -> Decimal:
        return self.preco_unitario * self.quantidade

    def para_dict(self) -> dict:
        return {
            'produto': self.produto.para_dict(),
            'quantidade': self.quantidade,
            'tamanho': self.tamanho,
            'cor': self.cor,
        }

    @classmethod
    def de_dict(cls, dados: dict) -> 'ItemCarrinho':
        return cls(
            produto=Produto.de_dict(dados['produto']),
            quantidade=int(dados['quantidade']),
            tamanho=dados['tamanho'],
            cor=dados['cor'],
        )


@dataclass
class Carrinho:
    """
    Agregado do carrinho de compras.
    Cada combinação (produto, tamanho, cor) aparece em uma única linha.
    """
    itens: List[ItemCarrinho] = field(default_factory=list)

    def _buscar(self, produto_id: str, tamanho: str, cor: str) -> Optional[ItemCarrinho]:
        chave = (produto_id, tamanho, cor)
        return next((item for item in self.itens if item.chave == chave), None)

    def adicionar(self, produto: Produto, tamanho: str, cor: str, quantidade: int = 1) -> bool:
        """
        Soma a quantidade à linha existente ou cria uma nova.
        Retorna True quando uma linha nova foi criada.
        """
        if quantidade < 1:
            raise QuantidadeInvalidaError()

        existente = self._buscar(produto.id, tamanho, cor)
        if existente:
            existente.quantidade += quantidade
            return False

        self.itens.append(ItemCarrinho(produto=produto, quantidade=quantidade, tamanho=tamanho, cor=cor))
        return True

    def remover(self, produto_id: str, tamanho: str, cor: str):
        self.itens = [item for item in self.itens if item.chave != (produto_id, tamanho, cor)]

    def definir_quantidade(self, produto_id: str, tamanho: str, cor: str, quantidade: int):
        """Quantidade abaixo de 1 é recusada; a linha só sai do carrinho via remover()."""
        if quantidade < 1:
            raise QuantidadeInvalidaError()
        item = self._buscar(produto_id, tamanho, cor)
        if item:
            item.quantidade = quantidade

    def limpar(self):
        self.itens = []

    @property
    def total(self) -> Decimal:
        return quantizar(sum((item.subtotal for item in self.itens), Decimal('0')))

    @property
    def contagem(self) -> int:
        return sum(item.quantidade for item in self.itens)

    @property
    def esta_vazio(self) -> bool:
        return not self.itens


@dataclass
class ListaDesejos:
    produto_ids: List[str] = field(default_factory=list)

    def adicionar(self, produto_id: str) -> bool:
        if produto_id in self.produto_ids:
            return False
        self.produto_ids.append(produto_id)
        return True

    def remover(self, produto_id: str):
        self.produto_ids = [pid for pid in self.produto_ids if pid != produto_id]

    def contem(self, produto_id: str) -> bool:
        return produto_id in self.produto_ids


@dataclass
class OpcaoFrete:
    """Cotação de frete. Derivada a cada consulta de CEP, nunca persistida sozinha."""
    servico: str
    preco: Optional[Decimal]
    dias: Optional[int]
    gratis: bool = False
    disponivel: bool = True

    @classmethod
    def indisponivel(cls) -> 'OpcaoFrete':
        return cls(servico='Indisponível', preco=None, dias=None, gratis=False, disponivel=False)


@dataclass
class Cliente:
    nome: str
    email: str
    telefone: str
    cpf: str


@dataclass
class Endereco:
    """Entidade do Endereço de Entrega."""
    cep: str
    rua: str
    numero: str
    bairro: str
    cidade: str
    estado: str
    complemento: Optional[str] = None


@dataclass
class ItemPedido:
    """Snapshot de um item no momento da compra (imutável)."""
    produto_id: str
    nome: str
    quantidade: int
    preco: Decimal
    tamanho: str
    cor: str

    @property
    def subtotal(self) -> Decimal:
        return self.preco * self.quantidade


@dataclass
class Pedido:
    """Entidade do Pedido de Venda. O total é fixado na criação e não é recalculado."""
    # Campos obrigatórios
    cliente: Cliente
    itens: List[ItemPedido]
    frete: OpcaoFrete
    subtotal: Decimal
    total: Decimal
    metodo_entrega: MetodoEntrega
    metodo_pagamento: MetodoPagamento
    # Campos opcionais/calculados
    endereco: Optional[Endereco] = None
    status: StatusPedido = StatusPedido.AGUARDANDO_PAGAMENTO
    usuario_id: Optional[str] = None
    link_pagamento: Optional[str] = None
    pedido_provedor_id: Optional[str] = None
    id: str = field(default_factory=gerar_id)
    data_criacao: datetime = field(default_factory=agora)
    data_pagamento: Optional[datetime] = None
