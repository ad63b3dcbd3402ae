from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import completa.vendas.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Pedido',
            fields=[
                ('id', models.CharField(default=completa.vendas.models.gerar_id, editable=False, max_length=64, primary_key=True, serialize=False)),
                ('usuario_id', models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ('status', models.CharField(choices=[('aguardando_pagamento', 'Aguardando Pagamento'), ('pago', 'Pago'), ('cancelado', 'Cancelado'), ('enviado', 'Enviado')], default='aguardando_pagamento', max_length=20)),
                ('data_criacao', models.DateTimeField(default=django.utils.timezone.now)),
                ('data_pagamento', models.DateTimeField(blank=True, null=True)),
                ('data_modificacao', models.DateTimeField(auto_now=True)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('servico_frete', models.CharField(max_length=100)),
                ('preco_frete', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('prazo_frete', models.PositiveIntegerField(blank=True, null=True)),
                ('frete_gratis', models.BooleanField(default=False)),
                ('metodo_entrega', models.CharField(choices=[('ENTREGA', 'Entrega'), ('RETIRADA', 'Retirada na Loja')], max_length=10)),
                ('metodo_pagamento', models.CharField(choices=[('CARTAO', 'Cartão de Crédito'), ('BOLETO', 'Boleto'), ('PIX', 'PIX'), ('WHATSAPP', 'Combinado pelo WhatsApp')], max_length=10)),
                ('link_pagamento', models.URLField(blank=True, max_length=500, null=True)),
                ('pedido_provedor_id', models.CharField(blank=True, max_length=100, null=True)),
                ('nome_cliente', models.CharField(max_length=255)),
                ('email_cliente', models.EmailField(max_length=254)),
                ('telefone_cliente', models.CharField(max_length=20)),
                ('cpf_cliente', models.CharField(max_length=14)),
                ('cep_entrega', models.CharField(blank=True, max_length=9)),
                ('rua_entrega', models.CharField(blank=True, max_length=255)),
                ('numero_entrega', models.CharField(blank=True, max_length=10)),
                ('complemento_entrega', models.CharField(blank=True, max_length=100, null=True)),
                ('bairro_entrega', models.CharField(blank=True, max_length=100)),
                ('cidade_entrega', models.CharField(blank=True, max_length=100)),
                ('estado_entrega', models.CharField(blank=True, max_length=2)),
            ],
            options={
                'verbose_name': 'Pedido',
                'verbose_name_plural': 'Pedidos',
                'db_table': 'vendas_pedido',
                'ordering': ['-data_criacao'],
            },
        ),
        migrations.CreateModel(
            name='ItemPedido',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('produto_id', models.CharField(max_length=64)),
                ('nome_produto', models.CharField(max_length=255)),
                ('preco_unitario', models.DecimalField(decimal_places=2, max_digits=10)),
                ('quantidade', models.PositiveIntegerField()),
                ('tamanho', models.CharField(max_length=20)),
                ('cor', models.CharField(max_length=50)),
                ('pedido', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='itens', to='vendas.pedido')),
            ],
            options={
                'verbose_name': 'Item do Pedido',
                'verbose_name_plural': 'Itens do Pedido',
                'db_table': 'vendas_item_pedido',
            },
        ),
    ]
