from rest_framework import serializers

from completa.core.entities import Cliente, Endereco
from completa.core.pagamento import ResultadoCheckoutPix


# ====================================================================
# SERIALIZERS DO CATÁLOGO
# ====================================================================

class ProdutoSerializer(serializers.Serializer):
    """Representa a entidade Produto; também valida a entrada do painel administrativo."""
    id = serializers.CharField(read_only=True)
    nome = serializers.CharField(max_length=255)
    descricao = serializers.CharField(required=False, allow_blank=True)
    preco = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    preco_promocional = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    preco_final = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    categoria = serializers.CharField(max_length=100)
    marca = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    imagem_url = serializers.CharField(max_length=500, required=False, allow_blank=True)
    tamanhos = serializers.ListField(child=serializers.CharField(max_length=20), required=False)
    cores = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    estoque = serializers.IntegerField(min_value=0, required=False)
    peso_kg = serializers.DecimalField(max_digits=6, decimal_places=3, min_value=0, required=False)
    comprimento_cm = serializers.DecimalField(max_digits=6, decimal_places=1, min_value=0, required=False)
    largura_cm = serializers.DecimalField(max_digits=6, decimal_places=1, min_value=0, required=False)
    altura_cm = serializers.DecimalField(max_digits=6, decimal_places=1, min_value=0, required=False)
    ativo = serializers.BooleanField(required=False)
    lancamento = serializers.BooleanField(required=False)
    mais_vendido = serializers.BooleanField(required=False)
    vendidos = serializers.IntegerField(read_only=True)
    data_criacao = serializers.DateTimeField(read_only=True)


class FiltroProdutosSerializer(serializers.Serializer):
    """Parâmetros de busca da vitrine (listas separadas por vírgula)."""
    busca = serializers.CharField(required=False, allow_blank=True)
    categorias = serializers.CharField(required=False, allow_blank=True)
    cores = serializers.CharField(required=False, allow_blank=True)
    tamanhos = serializers.CharField(required=False, allow_blank=True)
    marcas = serializers.CharField(required=False, allow_blank=True)
    preco_min = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    preco_max = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    ordenacao = serializers.CharField(default='relevance')

    LISTAS = ('categorias', 'cores', 'tamanhos', 'marcas')

    def to_filtros(self) -> dict:
        filtros = dict(self.validated_data)
        for campo in self.LISTAS:
            valor = filtros.pop(campo, '')
            filtros[campo] = [v.strip() for v in valor.split(',') if v.strip()]
        return filtros


# ====================================================================
# SERIALIZERS PARA O CARRINHO E LISTA DE DESEJOS
# ====================================================================

class ItemCarrinhoSerializer(serializers.Serializer):
    produto = ProdutoSerializer()
    quantidade = serializers.IntegerField()
    tamanho = serializers.CharField()
    cor = serializers.CharField()
    preco_unitario = serializers.DecimalField(max_digits=10, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)


class CarrinhoSerializer(serializers.Serializer):
    """
    Serializer principal para o carrinho de compras.
    Representa a lista de itens usando o ItemCarrinhoSerializer.
    """
    itens = ItemCarrinhoSerializer(many=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    contagem = serializers.IntegerField()


class LinhaCarrinhoSerializer(serializers.Serializer):
    """Identifica uma linha do carrinho (produto, tamanho, cor) nas requisições."""
    produto_id = serializers.CharField()
    tamanho = serializers.CharField(max_length=20)
    cor = serializers.CharField(max_length=50)
    # Quantidades abaixo de 1 são recusadas pela regra do carrinho
    quantidade = serializers.IntegerField(default=1)


class ListaDesejosEntradaSerializer(serializers.Serializer):
    produto_id = serializers.CharField()


# ====================================================================
# SERIALIZERS DE FRETE E ENDEREÇO
# ====================================================================

class OpcaoFreteSerializer(serializers.Serializer):
    servico = serializers.CharField()
    preco = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    dias = serializers.IntegerField(allow_null=True)
    gratis = serializers.BooleanField()
    disponivel = serializers.BooleanField()


class CotacaoFreteSerializer(serializers.Serializer):
    cep = serializers.CharField(max_length=9)


class EnderecoSerializer(serializers.Serializer):
    """Campos em branco são aceitos aqui; a completude é verificada no checkout."""
    cep = serializers.CharField(max_length=9, allow_blank=True, default='')
    rua = serializers.CharField(max_length=255, allow_blank=True, default='')
    numero = serializers.CharField(max_length=10, allow_blank=True, default='')
    complemento = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    bairro = serializers.CharField(max_length=100, allow_blank=True, default='')
    cidade = serializers.CharField(max_length=100, allow_blank=True, default='')
    estado = serializers.CharField(max_length=2, allow_blank=True, default='')


# ====================================================================
# SERIALIZER PARA CHECKOUT
# ====================================================================

class ClienteSerializer(serializers.Serializer):
    nome = serializers.CharField(max_length=255, allow_blank=True, default='')
    email = serializers.CharField(max_length=254, allow_blank=True, default='')
    telefone = serializers.CharField(max_length=20, allow_blank=True, default='')
    cpf = serializers.CharField(max_length=14, allow_blank=True, default='')


class CheckoutSerializer(serializers.Serializer):
    """
    Serializer para os dados de checkout.
    Só verifica o formato; a ordem das validações de negócio fica no caso de uso.
    """
    cliente = ClienteSerializer(default=dict)
    metodo_entrega = serializers.CharField(max_length=10, allow_blank=True, default='')
    metodo_pagamento = serializers.CharField(max_length=10, allow_blank=True, default='')
    endereco = EnderecoSerializer(required=False, allow_null=True)
    referencia = serializers.CharField(max_length=64, required=False, allow_blank=True)

    def to_cliente_entity(self) -> Cliente:
        # Campos ausentes chegam vazios; o caso de uso aponta o primeiro que falta
        dados = self.validated_data.get('cliente') or {}
        return Cliente(**{campo: dados.get(campo, '') for campo in ('nome', 'email', 'telefone', 'cpf')})

    def to_endereco_entity(self):
        dados = self.validated_data.get('endereco')
        if not dados:
            return None
        return Endereco(**dados)


class ItemPedidoSerializer(serializers.Serializer):
    produto_id = serializers.CharField()
    nome = serializers.CharField()
    quantidade = serializers.IntegerField()
    preco = serializers.DecimalField(max_digits=10, decimal_places=2)
    tamanho = serializers.CharField()
    cor = serializers.CharField()
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)


class PedidoSerializer(serializers.Serializer):
    id = serializers.CharField()
    usuario_id = serializers.CharField(allow_null=True)
    status = serializers.CharField(source='status.value')
    cliente = ClienteSerializer()
    endereco = EnderecoSerializer(allow_null=True)
    metodo_entrega = serializers.CharField(source='metodo_entrega.value')
    metodo_pagamento = serializers.CharField(source='metodo_pagamento.value')
    itens = ItemPedidoSerializer(many=True)
    frete = OpcaoFreteSerializer()
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    link_pagamento = serializers.CharField(allow_null=True)
    pedido_provedor_id = serializers.CharField(allow_null=True)
    data_criacao = serializers.DateTimeField()
    data_pagamento = serializers.DateTimeField(allow_null=True)


def serializar_resultado_checkout(resultado) -> dict:
    """União rotulada: 'REDIRECIONAMENTO' traz a URL; 'PIX' traz o código e a validade."""
    dados = {
        'tipo': resultado.tipo,
        'pedido': PedidoSerializer(resultado.pedido).data,
    }
    if isinstance(resultado, ResultadoCheckoutPix):
        dados.update({
            'codigo': resultado.codigo,
            'qr_code_url': resultado.qr_code_url,
            'expira_em': serializers.DateTimeField().to_representation(resultado.expira_em),
        })
    else:
        dados['url_redirecionamento'] = resultado.url_redirecionamento
    return dados


# ====================================================================
# SERIALIZERS ADMINISTRATIVOS E DE USUÁRIO
# ====================================================================

class AtualizarStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=30)


class LinkPagamentoSerializer(serializers.Serializer):
    link = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class ImagemProdutoSerializer(serializers.Serializer):
    arquivo = serializers.CharField(help_text="Conteúdo da imagem em base64 (ou data URL)")
    nome_arquivo = serializers.CharField(max_length=200, required=False, allow_blank=True)


class UsuarioSerializer(serializers.Serializer):
    id = serializers.CharField()
    nome = serializers.CharField()
    email = serializers.EmailField()
    papel = serializers.CharField()
    foto_url = serializers.CharField(allow_null=True)


class SincronizarUsuarioSerializer(serializers.Serializer):
    nome = serializers.CharField(max_length=150, required=False, allow_blank=True)
    foto_url = serializers.URLField(max_length=500, required=False, allow_null=True)
