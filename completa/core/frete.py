"""
Motor de cotação de frete.

Política única: frete grátis acima do limite, senão faixa regional pelo
prefixo do CEP somada a UMA sobretaxa (por volume ou por peso, escolhida
na configuração). Nenhuma chamada de rede acontece aqui.
"""
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Tuple

from completa.core.entities import ItemCarrinho, OpcaoFrete, quantizar, para_decimal

LIMITE_FRETE_GRATIS = Decimal('199.00')
PRAZO_FRETE_GRATIS = 5

SERVICO_PADRAO = 'Entrega Padrão'
SERVICO_GRATIS = 'Frete Grátis (Padrão)'
SERVICO_RETIRADA = 'Retirada na Loja'


def limpar_digitos(valor) -> str:
    return re.sub(r'\D', '', valor or '')


@dataclass(frozen=True)
class FaixaRegional:
    nome: str
    preco: Decimal
    dias: int
    prefixos: Tuple[range, ...] = ()

    def atende(self, prefixo: int) -> bool:
        return any(prefixo in intervalo for intervalo in self.prefixos)


FAIXA_PROXIMA = FaixaRegional('proxima', Decimal('14.00'), 2, (range(1, 20),))
FAIXA_INTERMEDIARIA = FaixaRegional(
    'intermediaria', Decimal('19.00'), 4, (range(20, 29), range(30, 40), range(80, 100))
)
FAIXA_DISTANTE = FaixaRegional('distante', Decimal('24.00'), 7)

FAIXAS = (FAIXA_PROXIMA, FAIXA_INTERMEDIARIA)


def faixa_por_cep(cep: str) -> FaixaRegional:
    """Classifica o CEP (já limpo) pelos dois primeiros dígitos."""
    prefixo = int(cep[:2])
    return next((faixa for faixa in FAIXAS if faixa.atende(prefixo)), FAIXA_DISTANTE)

# ====================================================================
# SOBRETAXAS (alternativas mutuamente exclusivas)
# ====================================================================

class SobretaxaPorVolume:
    """Valor fixo a cada grupo completo de N peças no carrinho."""

    def __init__(self, valor_por_grupo=Decimal('2.00'), tamanho_grupo: int = 3):
        self.valor_por_grupo = para_decimal(valor_por_grupo)
        self.tamanho_grupo = tamanho_grupo

    def __call__(self, itens: Iterable[ItemCarrinho]) -> Decimal:
        total_pecas = sum(item.quantidade for item in itens)
        return self.valor_por_grupo * (total_pecas // self.tamanho_grupo)


class SobretaxaPorPeso:
    """Valor por quilo acima da franquia, calculado sobre o peso total do carrinho."""

    def __init__(self, valor_por_kg=Decimal('5.00'), franquia_kg=Decimal('1')):
        self.valor_por_kg = para_decimal(valor_por_kg)
        self.franquia_kg = para_decimal(franquia_kg)

    def __call__(self, itens: Iterable[ItemCarrinho]) -> Decimal:
        peso_total = sum((item.produto.peso_kg * item.quantidade for item in itens), Decimal('0'))
        excedente = max(Decimal('0'), peso_total - self.franquia_kg)
        return quantizar(excedente * self.valor_por_kg)


SOBRETAXAS = {
    'volume': SobretaxaPorVolume,
    'peso': SobretaxaPorPeso,
}


def obter_sobretaxa(nome: str):
    try:
        return SOBRETAXAS[nome]()
    except KeyError:
        raise ValueError(f"Política de sobretaxa desconhecida: '{nome}'. Use 'volume' ou 'peso'.")

# ====================================================================
# COTAÇÃO
# ====================================================================

def calcular_frete(cep, itens, subtotal, sobretaxa=None) -> OpcaoFrete:
    """
    Cota o frete de entrega.
    CEP com quantidade de dígitos diferente de 8 resulta em opção indisponível, sem preço.
    """
    cep_limpo = limpar_digitos(cep)
    if len(cep_limpo) != 8:
        return OpcaoFrete.indisponivel()

    if para_decimal(subtotal) >= LIMITE_FRETE_GRATIS:
        return OpcaoFrete(
            servico=SERVICO_GRATIS, preco=Decimal('0.00'), dias=PRAZO_FRETE_GRATIS, gratis=True
        )

    itens = list(itens)
    sobretaxa = sobretaxa or SobretaxaPorVolume()
    faixa = faixa_por_cep(cep_limpo)
    return OpcaoFrete(
        servico=SERVICO_PADRAO,
        preco=quantizar(faixa.preco + sobretaxa(itens)),
        dias=faixa.dias,
    )


def opcao_retirada() -> OpcaoFrete:
    return OpcaoFrete(servico=SERVICO_RETIRADA, preco=Decimal('0.00'), dias=1, gratis=True)
