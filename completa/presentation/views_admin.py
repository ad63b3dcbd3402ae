# completa/presentation/views_admin.py
"""
Views da API do painel administrativo (produtos, pedidos e imagens).
"""
from rest_framework import status
from rest_framework.permissions import BasePermission
from rest_framework.response import Response
from rest_framework.views import APIView

from completa.core import dependency_injection as di
from completa.core.entities import Produto
from completa.core.exceptions import BaseErroCore
from .serializers import (
    AtualizarStatusSerializer,
    ImagemProdutoSerializer,
    LinkPagamentoSerializer,
    PedidoSerializer,
    ProdutoSerializer,
)
from .views import resposta_erro


class EhAdministrador(BasePermission):
    """Somente usuários com papel 'admin' (ou staff) acessam o painel."""
    message = "Você não tem permissão para acessar esta página."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.eh_admin)


class AdminAPIView(APIView):
    permission_classes = [EhAdministrador]


# ====================================================================
# DASHBOARD
# ====================================================================

class PainelAdminAPIView(AdminAPIView):

    def get(self, request):
        resumo = di.get_gerenciar_produtos_admin_use_case().resumo_painel()
        pedidos = di.get_gerenciar_pedidos_admin_use_case().listar_todos()
        resumo['total_pedidos'] = len(pedidos)
        resumo['pedidos_recentes'] = PedidoSerializer(pedidos[:5], many=True).data
        return Response(resumo)


# ====================================================================
# PRODUTOS
# ====================================================================

class ProdutosAdminAPIView(AdminAPIView):

    def get(self, request):
        produtos = di.get_gerenciar_produtos_admin_use_case().listar()
        return Response(ProdutoSerializer(produtos, many=True).data)

    def post(self, request):
        serializer = ProdutoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            produto = di.get_gerenciar_produtos_admin_use_case().criar(Produto(**serializer.validated_data))
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(ProdutoSerializer(produto).data, status=status.HTTP_201_CREATED)


class ProdutoAdminAPIView(AdminAPIView):

    def put(self, request, produto_id):
        serializer = ProdutoSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            produto = di.get_gerenciar_produtos_admin_use_case().atualizar(produto_id, dict(serializer.validated_data))
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(ProdutoSerializer(produto).data)

    def delete(self, request, produto_id):
        try:
            di.get_gerenciar_produtos_admin_use_case().deletar(produto_id)
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AlternarFlagProdutoAPIView(AdminAPIView):
    """Alterna ativo, lançamento ou mais vendido."""

    def post(self, request, produto_id, campo):
        try:
            produto = di.get_gerenciar_produtos_admin_use_case().alternar_flag(produto_id, campo)
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(ProdutoSerializer(produto).data)


class ImagemProdutoAPIView(AdminAPIView):

    def post(self, request):
        serializer = ImagemProdutoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            url = di.get_enviar_imagem_use_case().executar(
                serializer.validated_data['arquivo'],
                serializer.validated_data.get('nome_arquivo') or None,
            )
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response({'imagem_url': url}, status=status.HTTP_201_CREATED)


# ====================================================================
# PEDIDOS
# ====================================================================

class PedidosAdminAPIView(AdminAPIView):
    """Lista de pedidos, com filtro por status e busca por cliente ou ID."""

    def get(self, request):
        try:
            pedidos = di.get_gerenciar_pedidos_admin_use_case().listar_todos(
                status=request.query_params.get('status') or None,
                busca=request.query_params.get('busca') or None,
            )
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(PedidoSerializer(pedidos, many=True).data)


class PedidoAdminAPIView(AdminAPIView):

    def get(self, request, pedido_id):
        try:
            pedido = di.get_gerenciar_pedidos_admin_use_case().detalhar_pedido(pedido_id)
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(PedidoSerializer(pedido).data)


class AtualizarStatusPedidoAPIView(AdminAPIView):
    """
    View para atualizar o status de um pedido.
    """

    def post(self, request, pedido_id):
        serializer = AtualizarStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            pedido = di.get_gerenciar_pedidos_admin_use_case().atualizar_status_manual(
                pedido_id=pedido_id, novo_status=serializer.validated_data['status']
            )
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(PedidoSerializer(pedido).data)


class LinkPagamentoPedidoAPIView(AdminAPIView):

    def post(self, request, pedido_id):
        serializer = LinkPagamentoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            pedido = di.get_gerenciar_pedidos_admin_use_case().definir_link_pagamento(
                pedido_id, serializer.validated_data.get('link')
            )
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(PedidoSerializer(pedido).data)
