import django.utils.timezone
from django.db import migrations, models

import completa.catalog.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Produto',
            fields=[
                ('id', models.CharField(default=completa.catalog.models.gerar_id, editable=False, max_length=64, primary_key=True, serialize=False)),
                ('nome', models.CharField(max_length=255, verbose_name='Nome do Produto')),
                ('descricao', models.TextField(blank=True, verbose_name='Descrição Detalhada')),
                ('categoria', models.CharField(db_index=True, max_length=100)),
                ('marca', models.CharField(blank=True, max_length=100, null=True)),
                ('imagem_url', models.CharField(blank=True, max_length=500, verbose_name='URL da Imagem')),
                ('preco', models.DecimalField(decimal_places=2, max_digits=10, verbose_name='Preço de Venda')),
                ('preco_promocional', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Preço Promocional')),
                ('estoque', models.PositiveIntegerField(default=0, verbose_name='Estoque Atual')),
                ('vendidos', models.PositiveIntegerField(default=0)),
                ('tamanhos', models.JSONField(blank=True, default=list)),
                ('cores', models.JSONField(blank=True, default=list)),
                ('peso_kg', models.DecimalField(decimal_places=3, default=0, max_digits=6)),
                ('comprimento_cm', models.DecimalField(decimal_places=1, default=0, max_digits=6)),
                ('largura_cm', models.DecimalField(decimal_places=1, default=0, max_digits=6)),
                ('altura_cm', models.DecimalField(decimal_places=1, default=0, max_digits=6)),
                ('ativo', models.BooleanField(default=True)),
                ('lancamento', models.BooleanField(default=False)),
                ('mais_vendido', models.BooleanField(default=False)),
                ('data_criacao', models.DateTimeField(default=django.utils.timezone.now)),
                ('data_atualizacao', models.DateTimeField(auto_now=True, null=True)),
            ],
            options={
                'verbose_name': 'Produto',
                'verbose_name_plural': 'Produtos',
                'db_table': 'catalogo_produto',
                'ordering': ['-data_criacao'],
            },
        ),
    ]
