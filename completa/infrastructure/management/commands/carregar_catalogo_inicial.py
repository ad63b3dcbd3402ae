from datetime import datetime, timezone
from decimal import Decimal

from django.core.management.base import BaseCommand

from completa.core.entities import Produto
from completa.infrastructure import instances

URL_ASSETS = "https://cdn.jsdelivr.net/gh/Felipesc023/completa-assets@main/public/products"

PRODUTOS_INICIAIS = [
    {
        'nome': "Vestido Midi Linho",
        'preco': Decimal('389.90'),
        'categoria': "Vestidos",
        'imagem_url': f"{URL_ASSETS}/vestido_linho_1.jpg",
        'descricao': (
            "Vestido midi confeccionado em linho misto de alta qualidade. "
            "Possui decote quadrado, alças largas e fenda lateral."
        ),
        'tamanhos': ["P", "M", "G"],
        'cores': ["Bege", "Off White"],
        'marca': "Completa Signature",
        'data_criacao': datetime(2024, 3, 1, tzinfo=timezone.utc),
        'vendidos': 150,
        'lancamento': True,
        'mais_vendido': True,
        'estoque': 20,
        'peso_kg': Decimal('0.6'),
        'comprimento_cm': Decimal('30'),
        'largura_cm': Decimal('20'),
        'altura_cm': Decimal('5'),
    },
    {
        'nome': "Blusa Seda Off-White",
        'preco': Decimal('299.90'),
        'preco_promocional': Decimal('249.90'),
        'categoria': "Blusas",
        'imagem_url': f"{URL_ASSETS}/blusa_seda_1.jpg",
        'descricao': "Blusa em seda toque suave com caimento fluido. Decote V discreto e mangas 3/4.",
        'tamanhos': ["P", "M", "G", "GG"],
        'cores': ["Off White", "Branco"],
        'marca': "Soft Touch",
        'data_criacao': datetime(2024, 2, 15, tzinfo=timezone.utc),
        'vendidos': 89,
        'estoque': 15,
        'peso_kg': Decimal('0.3'),
        'comprimento_cm': Decimal('25'),
        'largura_cm': Decimal('18'),
        'altura_cm': Decimal('4'),
    },
]


class Command(BaseCommand):
    help = 'Carrega os produtos de lançamento do catálogo (ignora os que já existem)'

    def handle(self, *args, **kwargs):
        self.stdout.write('Carregando catálogo inicial...')

        existentes = {p.nome for p in instances.produto_repo.listar_todos()}
        criados = 0
        for dados in PRODUTOS_INICIAIS:
            if dados['nome'] in existentes:
                self.stdout.write(f'Produto "{dados["nome"]}" já existe')
                continue
            produto = instances.produto_repo.salvar(Produto(**dados))
            criados += 1
            self.stdout.write(self.style.SUCCESS(f'Criado produto "{produto.nome}"'))

        self.stdout.write(self.style.SUCCESS(f'Catálogo inicial carregado ({criados} novos produtos).'))
