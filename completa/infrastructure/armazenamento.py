"""
Adaptadores do armazenamento local (chave/valor) usado pelo carrinho e pela lista de desejos.
"""
from typing import Dict, Optional

from completa.core.ports import IArmazenamentoLocal


class ArmazenamentoSessaoDjango(IArmazenamentoLocal):
    """Guarda os valores na sessão do visitante (equivalente ao armazenamento do navegador)."""

    def __init__(self, session):
        self.session = session

    def carregar(self, chave: str) -> Optional[str]:
        return self.session.get(chave)

    def salvar(self, chave: str, valor: str):
        self.session[chave] = valor
        self.session.modified = True


class ArmazenamentoMemoria(IArmazenamentoLocal):
    def __init__(self, dados: Optional[Dict[str, str]] = None):
        self.dados = {} if dados is None else dados

    def carregar(self, chave: str) -> Optional[str]:
        return self.dados.get(chave)

    def salvar(self, chave: str, valor: str):
        self.dados[chave] = valor
