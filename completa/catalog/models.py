import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


def gerar_id():
    return str(uuid.uuid4())

# ====================================================================
# Produto
# ====================================================================

class Produto(models.Model):
    """Modelo para representar um produto (peça) no catálogo."""

    id = models.CharField(primary_key=True, max_length=64, default=gerar_id, editable=False)

    nome = models.CharField(max_length=255, verbose_name="Nome do Produto")
    descricao = models.TextField(blank=True, verbose_name="Descrição Detalhada")
    categoria = models.CharField(max_length=100, db_index=True)
    marca = models.CharField(max_length=100, blank=True, null=True)
    imagem_url = models.CharField(max_length=500, blank=True, verbose_name="URL da Imagem")

    # Preço e Estoque
    preco = models.DecimalField(max_digits=10, decimal_places=2, verbose_name="Preço de Venda")
    preco_promocional = models.DecimalField(
        max_digits=10, decimal_places=2, blank=True, null=True, verbose_name="Preço Promocional"
    )
    estoque = models.PositiveIntegerField(default=0, verbose_name="Estoque Atual")
    vendidos = models.PositiveIntegerField(default=0)

    # Variações (listas de strings sem repetição)
    tamanhos = models.JSONField(default=list, blank=True)
    cores = models.JSONField(default=list, blank=True)

    # Logística
    peso_kg = models.DecimalField(max_digits=6, decimal_places=3, default=0)
    comprimento_cm = models.DecimalField(max_digits=6, decimal_places=1, default=0)
    largura_cm = models.DecimalField(max_digits=6, decimal_places=1, default=0)
    altura_cm = models.DecimalField(max_digits=6, decimal_places=1, default=0)

    # Flags da vitrine
    ativo = models.BooleanField(default=True)
    lancamento = models.BooleanField(default=False)
    mais_vendido = models.BooleanField(default=False)

    # Datas
    data_criacao = models.DateTimeField(default=timezone.now)
    data_atualizacao = models.DateTimeField(auto_now=True, null=True)

    class Meta:
        verbose_name = "Produto"
        verbose_name_plural = "Produtos"
        ordering = ['-data_criacao']
        db_table = 'catalogo_produto'

    def clean(self):
        if self.preco_promocional and self.preco is not None and self.preco_promocional >= self.preco:
            raise ValidationError({"preco_promocional": "O preço promocional deve ser menor que o preço base."})

    def __str__(self):
        return self.nome

    @property
    def preco_formatado(self):
        """Retorna o preço formatado em Real Brasileiro."""
        return f"R$ {self.preco:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
