from decimal import Decimal
import uuid

from django.db import models
from django.utils import timezone


def gerar_id():
    return str(uuid.uuid4())


class Pedido(models.Model):
    """
    Modelo que representa um pedido/venda no sistema.
    O total é gravado na criação (subtotal + frete) e não é recalculado.
    """
    id = models.CharField(primary_key=True, max_length=64, default=gerar_id, editable=False)
    # Referência solta: pedidos de visitantes não têm usuário
    usuario_id = models.CharField(max_length=64, blank=True, null=True, db_index=True)

    # Status e Datas
    STATUS_CHOICES = [
        ('aguardando_pagamento', 'Aguardando Pagamento'),
        ('pago', 'Pago'),
        ('cancelado', 'Cancelado'),
        ('enviado', 'Enviado'),
    ]
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='aguardando_pagamento')
    data_criacao = models.DateTimeField(default=timezone.now)
    data_pagamento = models.DateTimeField(blank=True, null=True)
    data_modificacao = models.DateTimeField(auto_now=True)

    # Valores
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    # Frete (snapshot da cotação)
    servico_frete = models.CharField(max_length=100)
    preco_frete = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    prazo_frete = models.PositiveIntegerField(blank=True, null=True)
    frete_gratis = models.BooleanField(default=False)

    # Pagamento e Entrega
    METODO_ENTREGA_CHOICES = [
        ('ENTREGA', 'Entrega'),
        ('RETIRADA', 'Retirada na Loja'),
    ]
    METODO_PAGAMENTO_CHOICES = [
        ('CARTAO', 'Cartão de Crédito'),
        ('BOLETO', 'Boleto'),
        ('PIX', 'PIX'),
        ('WHATSAPP', 'Combinado pelo WhatsApp'),
    ]
    metodo_entrega = models.CharField(max_length=10, choices=METODO_ENTREGA_CHOICES)
    metodo_pagamento = models.CharField(max_length=10, choices=METODO_PAGAMENTO_CHOICES)
    link_pagamento = models.URLField(max_length=500, blank=True, null=True)
    pedido_provedor_id = models.CharField(max_length=100, blank=True, null=True)

    # Cliente
    nome_cliente = models.CharField(max_length=255)
    email_cliente = models.EmailField()
    telefone_cliente = models.CharField(max_length=20)
    cpf_cliente = models.CharField(max_length=14)

    # Dados de Entrega (snapshot do endereço; vazio na retirada)
    cep_entrega = models.CharField(max_length=9, blank=True)
    rua_entrega = models.CharField(max_length=255, blank=True)
    numero_entrega = models.CharField(max_length=10, blank=True)
    complemento_entrega = models.CharField(max_length=100, blank=True, null=True)
    bairro_entrega = models.CharField(max_length=100, blank=True)
    cidade_entrega = models.CharField(max_length=100, blank=True)
    estado_entrega = models.CharField(max_length=2, blank=True)

    class Meta:
        verbose_name = 'Pedido'
        verbose_name_plural = 'Pedidos'
        db_table = 'vendas_pedido'
        ordering = ['-data_criacao']

    def __str__(self):
        return f"Pedido #{self.id} - {self.nome_cliente}"


class ItemPedido(models.Model):
    """
    Modelo que representa um item dentro de um pedido.
    Mantém um snapshot dos dados do produto no momento da compra.
    """
    pedido = models.ForeignKey(Pedido, related_name='itens', on_delete=models.CASCADE)
    produto_id = models.CharField(max_length=64)

    # Snapshot dos dados do produto
    nome_produto = models.CharField(max_length=255)
    preco_unitario = models.DecimalField(max_digits=10, decimal_places=2)
    quantidade = models.PositiveIntegerField()
    tamanho = models.CharField(max_length=20)
    cor = models.CharField(max_length=50)

    class Meta:
        verbose_name = 'Item do Pedido'
        verbose_name_plural = 'Itens do Pedido'
        db_table = 'vendas_item_pedido'

    def __str__(self):
        return f"{self.quantidade}x {self.nome_produto} ({self.tamanho}/{self.cor})"

    @property
    def subtotal(self):
        return self.preco_unitario * self.quantidade
