"""
Mapeadores (Mappers) para converter entre:
1. Modelos do Django ORM
2. Entidades de Domínio (completa.core.entities)
"""
from typing import Any, Optional, Type

from django.apps import apps
from django.db import models

# Importa as entidades do Core
from completa.core.entities import (
    Cliente as ClienteEntity,
    Endereco as EnderecoEntity,
    ItemPedido as ItemPedidoEntity,
    MetodoEntrega,
    MetodoPagamento,
    OpcaoFrete,
    Pedido as PedidoEntity,
    Produto as ProdutoEntity,
    StatusPedido,
    Usuario as UsuarioEntity,
)

# ====================================================================
# Uso de apps.get_model para evitar dependências circulares
# ====================================================================

def get_model(app_label: str, model_name: str):
    """Retorna um modelo do Django de forma segura (lazy loading)."""
    return apps.get_model(app_label, model_name)


# ====================================================================
# MAPPER DO CATÁLOGO
# ====================================================================

class ProdutoMapper:
    """Mapeador para Produto."""

    CAMPOS = (
        'nome', 'descricao', 'preco', 'preco_promocional', 'categoria', 'marca', 'imagem_url',
        'tamanhos', 'cores', 'estoque', 'peso_kg', 'comprimento_cm', 'largura_cm', 'altura_cm',
        'ativo', 'lancamento', 'mais_vendido', 'vendidos', 'data_criacao',
    )

    @classmethod
    def model_class(cls) -> Type[models.Model]:
        return get_model('catalog', 'Produto')

    @staticmethod
    def to_entity(model: Any) -> Optional[ProdutoEntity]:
        """Converte Produto Model para Produto Entity."""
        if not model: return None
        return ProdutoEntity(
            id=model.id,
            nome=model.nome,
            descricao=model.descricao,
            preco=model.preco,
            preco_promocional=model.preco_promocional,
            categoria=model.categoria,
            marca=model.marca,
            imagem_url=model.imagem_url,
            tamanhos=list(model.tamanhos or []),
            cores=list(model.cores or []),
            estoque=model.estoque,
            peso_kg=model.peso_kg,
            comprimento_cm=model.comprimento_cm,
            largura_cm=model.largura_cm,
            altura_cm=model.altura_cm,
            ativo=model.ativo,
            lancamento=model.lancamento,
            mais_vendido=model.mais_vendido,
            vendidos=model.vendidos,
            data_criacao=model.data_criacao,
            data_atualizacao=model.data_atualizacao,
        )

    @classmethod
    def to_model(cls, entity: ProdutoEntity, model: Optional[Any] = None) -> Any:
        """Converte Produto Entity para Produto Model."""
        if model is None:
            # Novo registro: o ID é gerado pela entidade
            model = cls.model_class()(id=entity.id)
        for campo in cls.CAMPOS:
            setattr(model, campo, getattr(entity, campo))
        return model


# ====================================================================
# MAPPERS DE VENDAS
# ====================================================================

class ItemPedidoMapper:
    """Mapeador para ItemPedido."""

    @staticmethod
    def to_entity(model: Any) -> ItemPedidoEntity:
        return ItemPedidoEntity(
            produto_id=model.produto_id,
            nome=model.nome_produto,
            quantidade=model.quantidade,
            preco=model.preco_unitario,
            tamanho=model.tamanho,
            cor=model.cor,
        )

    @staticmethod
    def to_model(entity: ItemPedidoEntity, pedido_model: Any) -> Any:
        ItemPedidoModel = get_model('vendas', 'ItemPedido')
        return ItemPedidoModel(
            pedido=pedido_model,
            produto_id=entity.produto_id,
            nome_produto=entity.nome,
            quantidade=entity.quantidade,
            preco_unitario=entity.preco,
            tamanho=entity.tamanho,
            cor=entity.cor,
        )


class PedidoMapper:
    """Mapeador para Pedido (cliente, endereço e frete ficam achatados no modelo)."""

    @classmethod
    def model_class(cls) -> Type[models.Model]:
        return get_model('vendas', 'Pedido')

    @staticmethod
    def to_entity(model: Any) -> Optional[PedidoEntity]:
        """Converte Pedido Model (com itens) para Pedido Entity."""
        if not model: return None

        endereco = None
        if model.metodo_entrega == MetodoEntrega.ENTREGA.value:
            endereco = EnderecoEntity(
                cep=model.cep_entrega,
                rua=model.rua_entrega,
                numero=model.numero_entrega,
                complemento=model.complemento_entrega,
                bairro=model.bairro_entrega,
                cidade=model.cidade_entrega,
                estado=model.estado_entrega,
            )

        return PedidoEntity(
            id=model.id,
            usuario_id=model.usuario_id,
            cliente=ClienteEntity(
                nome=model.nome_cliente,
                email=model.email_cliente,
                telefone=model.telefone_cliente,
                cpf=model.cpf_cliente,
            ),
            itens=[ItemPedidoMapper.to_entity(item) for item in model.itens.all()],
            frete=OpcaoFrete(
                servico=model.servico_frete,
                preco=model.preco_frete,
                dias=model.prazo_frete,
                gratis=model.frete_gratis,
            ),
            subtotal=model.subtotal,
            total=model.total,
            metodo_entrega=MetodoEntrega(model.metodo_entrega),
            metodo_pagamento=MetodoPagamento(model.metodo_pagamento),
            endereco=endereco,
            status=StatusPedido(model.status),
            link_pagamento=model.link_pagamento,
            pedido_provedor_id=model.pedido_provedor_id,
            data_criacao=model.data_criacao,
            data_pagamento=model.data_pagamento,
        )

    @classmethod
    def to_model(cls, entity: PedidoEntity, model: Optional[Any] = None) -> Any:
        """Converte Pedido Entity para Pedido Model (sem os itens)."""
        if model is None:
            model = cls.model_class()(id=entity.id)

        model.usuario_id = entity.usuario_id
        model.status = entity.status.value
        model.data_criacao = entity.data_criacao
        model.data_pagamento = entity.data_pagamento
        model.subtotal = entity.subtotal
        model.total = entity.total
        model.servico_frete = entity.frete.servico
        model.preco_frete = entity.frete.preco
        model.prazo_frete = entity.frete.dias
        model.frete_gratis = entity.frete.gratis
        model.metodo_entrega = entity.metodo_entrega.value
        model.metodo_pagamento = entity.metodo_pagamento.value
        model.link_pagamento = entity.link_pagamento
        model.pedido_provedor_id = entity.pedido_provedor_id

        model.nome_cliente = entity.cliente.nome
        model.email_cliente = entity.cliente.email
        model.telefone_cliente = entity.cliente.telefone
        model.cpf_cliente = entity.cliente.cpf

        endereco = entity.endereco
        model.cep_entrega = endereco.cep if endereco else ''
        model.rua_entrega = endereco.rua if endereco else ''
        model.numero_entrega = endereco.numero if endereco else ''
        model.complemento_entrega = endereco.complemento if endereco else None
        model.bairro_entrega = endereco.bairro if endereco else ''
        model.cidade_entrega = endereco.cidade if endereco else ''
        model.estado_entrega = endereco.estado if endereco else ''
        return model


# ====================================================================
# MAPPER DE USUÁRIO
# ====================================================================

class UsuarioMapper:
    """Mapeador para o Usuário (o ID do perfil é a chave primária do modelo)."""

    @staticmethod
    def to_entity(model: Any) -> Optional[UsuarioEntity]:
        """Converte Usuario Model para Usuario Entity."""
        if not model: return None
        return UsuarioEntity(
            id=str(model.pk),
            nome=model.get_full_name() or model.email,
            email=model.email,
            papel='admin' if model.eh_admin else model.papel,
            foto_url=model.foto_url,
        )
