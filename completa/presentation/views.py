"""
Views da API da loja: catálogo, carrinho, lista de desejos, frete e checkout.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from completa.core import dependency_injection as di
from completa.core.exceptions import (
    BaseErroCore,
    ConfiguracaoServidorError,
    DadosInvalidosError,
    ItemNaoEncontradoError,
    PagamentoFalhouError,
    ProvedorPagamentoError,
    StatusInvalidoError,
    UploadImagemError,
)
from .serializers import (
    CarrinhoSerializer,
    CheckoutSerializer,
    CotacaoFreteSerializer,
    EnderecoSerializer,
    FiltroProdutosSerializer,
    LinhaCarrinhoSerializer,
    ListaDesejosEntradaSerializer,
    OpcaoFreteSerializer,
    PedidoSerializer,
    ProdutoSerializer,
    serializar_resultado_checkout,
)

logger = logging.getLogger(__name__)


# ====================================================================
# TRADUÇÃO DE ERROS DO CORE PARA HTTP
# ====================================================================

def resposta_erro(erro: BaseErroCore) -> Response:
    """Converte uma exceção da camada Core na resposta HTTP correspondente."""
    if isinstance(erro, (DadosInvalidosError, StatusInvalidoError)):
        return Response({'message': erro.message}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(erro, ItemNaoEncontradoError):
        return Response({'message': erro.message}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(erro, ConfiguracaoServidorError):
        return Response({'message': erro.message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    if isinstance(erro, ProvedorPagamentoError):
        # Repassa o status do provedor para que o cliente possa corrigir os dados
        codigo = erro.status_code if 400 <= erro.status_code < 600 else status.HTTP_502_BAD_GATEWAY
        return Response({'message': erro.message, 'detalhes': erro.detalhes}, status=codigo)
    if isinstance(erro, UploadImagemError):
        return Response({'message': erro.message, 'detalhes': erro.detalhes}, status=status.HTTP_502_BAD_GATEWAY)
    if isinstance(erro, PagamentoFalhouError):
        return Response({'message': erro.message}, status=status.HTTP_502_BAD_GATEWAY)
    logger.error("Erro do core sem mapeamento HTTP: %r", erro)
    return Response({'message': str(erro)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


# ====================================================================
# 1. CATÁLOGO
# ====================================================================

class ProdutoListaAPIView(APIView):
    """Lista os produtos ativos com filtros e ordenação."""

    def get(self, request):
        filtros = FiltroProdutosSerializer(data=request.query_params)
        filtros.is_valid(raise_exception=True)
        try:
            produtos = di.get_listar_produtos_use_case().listar(**filtros.to_filtros())
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(ProdutoSerializer(produtos, many=True).data)


class ProdutoDetalheAPIView(APIView):

    def get(self, request, produto_id):
        try:
            produto = di.get_listar_produtos_use_case().detalhar(produto_id)
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(ProdutoSerializer(produto).data)


class VitrinesAPIView(APIView):
    """Destaques da página inicial: lançamentos e mais vendidos."""

    def get(self, request):
        vitrines = di.get_listar_produtos_use_case().vitrines()
        return Response({
            nome: ProdutoSerializer(produtos, many=True).data
            for nome, produtos in vitrines.items()
        })


# ====================================================================
# 2. CARRINHO E LISTA DE DESEJOS (sessão do visitante)
# ====================================================================

class CarrinhoAPIView(APIView):
    """
    API View para gerenciar o carrinho da sessão.
    POST adiciona, PATCH altera a quantidade e DELETE remove uma linha (ou esvazia).
    """

    def _resposta(self, carrinho_uc, codigo=status.HTTP_200_OK, **extras):
        dados = {'carrinho': CarrinhoSerializer(carrinho_uc.carrinho).data, **extras}
        return Response(dados, status=codigo)

    def get(self, request):
        carrinho_uc = di.get_gerenciar_carrinho_use_case(request.session)
        return Response(CarrinhoSerializer(carrinho_uc.carrinho).data)

    def post(self, request):
        serializer = LinhaCarrinhoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dados = serializer.validated_data

        carrinho_uc = di.get_gerenciar_carrinho_use_case(request.session)
        try:
            produto = di.get_listar_produtos_use_case().detalhar(dados['produto_id'])
            linha_nova = carrinho_uc.adicionar(produto, dados['tamanho'], dados['cor'], dados['quantidade'])
        except BaseErroCore as e:
            return resposta_erro(e)
        # A interface abre o carrinho quando uma linha nova é criada
        return self._resposta(carrinho_uc, status.HTTP_201_CREATED, abrir_carrinho=linha_nova)

    def patch(self, request):
        serializer = LinhaCarrinhoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dados = serializer.validated_data

        carrinho_uc = di.get_gerenciar_carrinho_use_case(request.session)
        try:
            carrinho_uc.definir_quantidade(dados['produto_id'], dados['tamanho'], dados['cor'], dados['quantidade'])
        except BaseErroCore as e:
            return resposta_erro(e)
        return self._resposta(carrinho_uc)

    def delete(self, request):
        carrinho_uc = di.get_gerenciar_carrinho_use_case(request.session)
        if not request.data.get('produto_id'):
            carrinho_uc.limpar()
            return self._resposta(carrinho_uc)

        serializer = LinhaCarrinhoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dados = serializer.validated_data
        carrinho_uc.remover(dados['produto_id'], dados['tamanho'], dados['cor'])
        return self._resposta(carrinho_uc)


class ListaDesejosAPIView(APIView):

    def _resposta(self, lista_uc, codigo=status.HTTP_200_OK):
        return Response(
            {'produto_ids': lista_uc.lista.produto_ids, 'contagem': lista_uc.contagem},
            status=codigo,
        )

    def get(self, request):
        return self._resposta(di.get_gerenciar_lista_desejos_use_case(request.session))

    def post(self, request):
        serializer = ListaDesejosEntradaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        produto_id = serializer.validated_data['produto_id']

        lista_uc = di.get_gerenciar_lista_desejos_use_case(request.session)
        try:
            di.get_listar_produtos_use_case().detalhar(produto_id)
        except BaseErroCore as e:
            return resposta_erro(e)
        adicionado = lista_uc.adicionar(produto_id)
        return self._resposta(lista_uc, status.HTTP_201_CREATED if adicionado else status.HTTP_200_OK)

    def delete(self, request):
        serializer = ListaDesejosEntradaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lista_uc = di.get_gerenciar_lista_desejos_use_case(request.session)
        lista_uc.remover(serializer.validated_data['produto_id'])
        return self._resposta(lista_uc)


# ====================================================================
# 3. FRETE E CEP
# ====================================================================

class FreteAPIView(APIView):
    """Cotação de frete para o carrinho da sessão."""

    def post(self, request):
        serializer = CotacaoFreteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        carrinho = di.get_gerenciar_carrinho_use_case(request.session).carrinho
        opcao = di.get_cotar_frete_use_case().executar(serializer.validated_data['cep'], carrinho)
        return Response(OpcaoFreteSerializer(opcao).data)


class ConsultaCepAPIView(APIView):

    def get(self, request, cep):
        try:
            endereco = di.get_consultar_cep_use_case().executar(cep)
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(EnderecoSerializer(endereco).data)


# ====================================================================
# 4. CHECKOUT
# ====================================================================

def _usuario_id(request):
    return str(request.user.pk) if request.user.is_authenticated else None


class CheckoutAPIView(APIView):
    """
    API View para processar o checkout do carrinho da sessão com o PagBank.
    O carrinho só é esvaziado quando o provedor aceita o pedido.
    """

    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        carrinho_uc = di.get_gerenciar_carrinho_use_case(request.session)
        checkout_uc = di.get_iniciar_checkout_use_case()
        try:
            resultado = checkout_uc.executar(
                itens=carrinho_uc.carrinho.itens,
                cliente=serializer.to_cliente_entity(),
                metodo_entrega=serializer.validated_data['metodo_entrega'],
                metodo_pagamento=serializer.validated_data['metodo_pagamento'],
                endereco=serializer.to_endereco_entity(),
                referencia=serializer.validated_data.get('referencia') or None,
                urls_notificacao=[f"https://{request.get_host()}/api/pagbank/webhook"],
                usuario_id=_usuario_id(request),
            )
        except BaseErroCore as e:
            return resposta_erro(e)

        carrinho_uc.limpar()
        return Response(serializar_resultado_checkout(resultado), status=status.HTTP_201_CREATED)


class CheckoutWhatsappAPIView(APIView):
    """Registra o pedido e devolve o link de conversa com a loja."""

    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        carrinho_uc = di.get_gerenciar_carrinho_use_case(request.session)
        try:
            pedido, url = di.get_registrar_pedido_whatsapp_use_case().executar(
                itens=carrinho_uc.carrinho.itens,
                cliente=serializer.to_cliente_entity(),
                metodo_entrega=serializer.validated_data['metodo_entrega'],
                endereco=serializer.to_endereco_entity(),
                usuario_id=_usuario_id(request),
            )
        except BaseErroCore as e:
            return resposta_erro(e)

        carrinho_uc.limpar()
        return Response(
            {'pedido': PedidoSerializer(pedido).data, 'url_whatsapp': url},
            status=status.HTTP_201_CREATED,
        )
