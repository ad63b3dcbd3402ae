"""
Camada de Infraestrutura: Implementação de Repositórios.

Esta camada traduz as operações abstratas definidas nas Portas da Core
em chamadas concretas ao framework (Django ORM) ou a coleções em memória.
Todo repositório expõe assinar(callback), que entrega a coleção completa
imediatamente e a cada alteração.
"""
import copy
from typing import Callable, Dict, List, Optional

from django.apps import apps
from django.contrib.auth import get_user_model
from django.db import transaction

# Importações da Camada CORE (ENTIDADES e PORTAS)
from completa.core.entities import Pedido, Produto, Usuario
from completa.core.eventos import Notificador
from completa.core.exceptions import ProdutoNaoEncontradoError
from completa.core.ports import IPedidoRepository, IProdutoRepository, IUsuarioRepository

from .mappers import ItemPedidoMapper, PedidoMapper, ProdutoMapper, UsuarioMapper



# Helper para Lazy Loading
def get_model(app_label, model_name):
    """Busca o modelo Django de forma segura (Lazy Loading)."""
    return apps.get_model(app_label, model_name)


# ====================================================================
# 1. REPOSITÓRIOS (Implementação Django ORM)
# ====================================================================

class ProdutoRepositoryDjango(IProdutoRepository):
    """Implementação do ProdutoRepository usando o Django ORM."""

    def __init__(self):
        self.notificador = Notificador(self.listar_todos)

    @property
    def ProdutoModel(self):
        return get_model('catalog', 'Produto')

    def buscar_por_id(self, produto_id: str) -> Optional[Produto]:
        try:
            return ProdutoMapper.to_entity(self.ProdutoModel.objects.get(pk=produto_id))
        except self.ProdutoModel.DoesNotExist:
            return None

    def listar_todos(self) -> List[Produto]:
        return [ProdutoMapper.to_entity(model) for model in self.ProdutoModel.objects.all()]

    @transaction.atomic
    def salvar(self, produto: Produto) -> Produto:
        """Salva ou atualiza um Produto, convertendo a entidade para o modelo."""
        model = self.ProdutoModel.objects.filter(pk=produto.id).first()
        model = ProdutoMapper.to_model(produto, model)
        model.save()
        return ProdutoMapper.to_entity(model)

    @transaction.atomic
    def deletar(self, produto_id: str):
        removidos, _ = self.ProdutoModel.objects.filter(pk=produto_id).delete()
        if not removidos:
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não existe.")

    def assinar(self, callback: Callable[[List[Produto]], None]) -> Callable[[], None]:
        return self.notificador.assinar(callback)

    def publicar_alteracao(self):
        """Chamado pelos sinais do modelo após o commit."""
        self.notificador.publicar()


class PedidoRepositoryDjango(IPedidoRepository):
    """Implementação do PedidoRepository usando o Django ORM."""

    def __init__(self):
        self.notificador = Notificador(self.listar_todos)

    @property
    def PedidoModel(self):
        return get_model('vendas', 'Pedido')

    def _consulta(self):
        return self.PedidoModel.objects.prefetch_related('itens')

    @transaction.atomic
    def salvar(self, pedido: Pedido) -> Pedido:
        """
        Cria o pedido com seus itens ou atualiza um existente.
        Os itens são gravados apenas na criação (snapshot imutável).
        """
        model = self.PedidoModel.objects.filter(pk=pedido.id).first()
        novo = model is None
        model = PedidoMapper.to_model(pedido, model)
        model.save()

        if novo:
            ItemPedidoModel = get_model('vendas', 'ItemPedido')
            ItemPedidoModel.objects.bulk_create(
                [ItemPedidoMapper.to_model(item, model) for item in pedido.itens]
            )

        return PedidoMapper.to_entity(self._consulta().get(pk=model.pk))

    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]:
        try:
            return PedidoMapper.to_entity(self._consulta().get(pk=pedido_id))
        except self.PedidoModel.DoesNotExist:
            return None

    def listar_todos(self, status: Optional[str] = None) -> List[Pedido]:
        qs = self._consulta().order_by('-data_criacao')
        if status:
            qs = qs.filter(status=status)
        return [PedidoMapper.to_entity(model) for model in qs]

    def assinar(self, callback: Callable[[List[Pedido]], None]) -> Callable[[], None]:
        return self.notificador.assinar(callback)

    def publicar_alteracao(self):
        self.notificador.publicar()


class UsuarioRepositoryDjango(IUsuarioRepository):
    """Perfis sobre o modelo de usuário configurado em AUTH_USER_MODEL."""

    @property
    def UsuarioModel(self):
        return get_user_model()

    def buscar_por_id(self, usuario_id: str) -> Optional[Usuario]:
        try:
            return UsuarioMapper.to_entity(self.UsuarioModel.objects.get(pk=usuario_id))
        except (self.UsuarioModel.DoesNotExist, ValueError):
            return None

    @transaction.atomic
    def salvar(self, usuario: Usuario) -> Usuario:
        model = self.UsuarioModel.objects.filter(email=usuario.email).first()
        if model is None:
            model = self.UsuarioModel.objects.create_user(email=usuario.email)
        model.first_name = usuario.nome[:150]
        model.foto_url = usuario.foto_url
        model.papel = usuario.papel
        model.save()
        return UsuarioMapper.to_entity(model)


# ====================================================================
# 2. REPOSITÓRIOS EM MEMÓRIA (Desenvolvimento e testes)
# ====================================================================

# Coleções compartilhadas pelo processo
PRODUTOS_DB: Dict[str, Produto] = {}
PEDIDOS_DB: Dict[str, Pedido] = {}
USUARIOS_DB: Dict[str, Usuario] = {}


class ProdutoRepositoryMemoria(IProdutoRepository):
    def __init__(self, banco: Optional[Dict[str, Produto]] = None):
        self.banco = PRODUTOS_DB if banco is None else banco
        self.notificador = Notificador(self.listar_todos)

    def buscar_por_id(self, produto_id: str) -> Optional[Produto]:
        produto = self.banco.get(produto_id)
        return copy.deepcopy(produto) if produto else None

    def listar_todos(self) -> List[Produto]:
        return sorted(
            (copy.deepcopy(p) for p in self.banco.values()),
            key=lambda p: p.data_criacao,
            reverse=True,
        )

    def salvar(self, produto: Produto) -> Produto:
        self.banco[produto.id] = copy.deepcopy(produto)
        self.notificador.publicar()
        return copy.deepcopy(produto)

    def deletar(self, produto_id: str):
        if produto_id not in self.banco:
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não existe.")
        del self.banco[produto_id]
        self.notificador.publicar()

    def assinar(self, callback: Callable[[List[Produto]], None]) -> Callable[[], None]:
        return self.notificador.assinar(callback)


class PedidoRepositoryMemoria(IPedidoRepository):
    def __init__(self, banco: Optional[Dict[str, Pedido]] = None):
        self.banco = PEDIDOS_DB if banco is None else banco
        self.notificador = Notificador(self.listar_todos)

    def salvar(self, pedido: Pedido) -> Pedido:
        existente = self.banco.get(pedido.id)
        if existente:
            # Itens e total permanecem os da criação
            pedido = copy.deepcopy(pedido)
            pedido.itens = copy.deepcopy(existente.itens)
            pedido.total = existente.total
        self.banco[pedido.id] = copy.deepcopy(pedido)
        self.notificador.publicar()
        return copy.deepcopy(pedido)

    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]:
        pedido = self.banco.get(pedido_id)
        return copy.deepcopy(pedido) if pedido else None

    def listar_todos(self, status: Optional[str] = None) -> List[Pedido]:
        pedidos = [copy.deepcopy(p) for p in self.banco.values()]
        if status:
            pedidos = [p for p in pedidos if p.status.value == status]
        return sorted(pedidos, key=lambda p: p.data_criacao, reverse=True)

    def assinar(self, callback: Callable[[List[Pedido]], None]) -> Callable[[], None]:
        return self.notificador.assinar(callback)


class UsuarioRepositoryMemoria(IUsuarioRepository):
    def __init__(self, banco: Optional[Dict[str, Usuario]] = None):
        self.banco = USUARIOS_DB if banco is None else banco

    def buscar_por_id(self, usuario_id: str) -> Optional[Usuario]:
        usuario = self.banco.get(usuario_id)
        return copy.deepcopy(usuario) if usuario else None

    def salvar(self, usuario: Usuario) -> Usuario:
        self.banco[usuario.id] = copy.deepcopy(usuario)
        return copy.deepcopy(usuario)
