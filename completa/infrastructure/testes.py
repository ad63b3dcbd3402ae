from datetime import datetime, timedelta, timezone
from decimal import Decimal
from io import StringIO
from unittest.mock import MagicMock, Mock, patch

import requests
from django.contrib.auth import get_user_model
from django.contrib.sessions.backends.signed_cookies import SessionStore
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db.utils import OperationalError
from django.test import SimpleTestCase, TestCase, override_settings

# Importamos as classes que queremos testar
from completa.catalog.models import Produto as ProdutoModel
from completa.core.entities import (
    Cliente, Endereco, ItemPedido, MetodoEntrega, MetodoPagamento, OpcaoFrete,
    Pedido, Produto, StatusPedido, Usuario,
)
from completa.core.exceptions import (
    ConfiguracaoServidorError,
    FalhaComunicacaoPagamentoError,
    ProdutoNaoEncontradoError,
    ProvedorPagamentoError,
    RespostaInvalidaProvedorError,
    UploadImagemError,
)
from completa.core.pagamento import (
    ClientePagamento, EnderecoPagamento, ItemPagamento, SolicitacaoPedidoPagamento, TelefonePagamento,
)
from completa.infrastructure import instances
from completa.infrastructure.armazenamento import ArmazenamentoMemoria, ArmazenamentoSessaoDjango
from completa.infrastructure.gateways import GitHubImagemGateway, PagBankGateway, ViaCepGateway
from completa.infrastructure.repositories import (
    PedidoRepositoryDjango,
    PedidoRepositoryMemoria,
    ProdutoRepositoryDjango,
    ProdutoRepositoryMemoria,
    UsuarioRepositoryDjango,
    UsuarioRepositoryMemoria,
)
from completa.vendas.models import Pedido as PedidoModel

INSTANTE = datetime(2025, 3, 10, 14, 0, tzinfo=timezone.utc)


def criar_produto(**kwargs) -> Produto:
    dados = dict(
        id='prod-1', nome='Vestido Midi Linho', preco=Decimal('389.90'), categoria='Vestidos',
        tamanhos=['P', 'M'], cores=['Bege'], estoque=20, peso_kg=Decimal('0.6'),
    )
    dados.update(kwargs)
    return Produto(**dados)


def criar_pedido(**kwargs) -> Pedido:
    dados = dict(
        id='ped-1',
        cliente=Cliente('Maria Silva', 'maria@example.com', '16991234567', '12345678909'),
        itens=[
            ItemPedido('prod-1', 'Vestido Midi Linho', 1, Decimal('389.90'), 'M', 'Bege'),
            ItemPedido('prod-2', 'Blusa Seda', 2, Decimal('249.90'), 'P', 'Branco'),
        ],
        frete=OpcaoFrete('Frete Grátis (Padrão)', Decimal('0.00'), 5, gratis=True),
        subtotal=Decimal('889.70'),
        total=Decimal('889.70'),
        metodo_entrega=MetodoEntrega.ENTREGA,
        metodo_pagamento=MetodoPagamento.PIX,
        endereco=Endereco('14010120', 'Rua das Flores', '100', 'Centro', 'Ribeirão Preto', 'SP', 'Ap 3'),
        data_criacao=INSTANTE,
    )
    dados.update(kwargs)
    return Pedido(**dados)


def criar_solicitacao(metodo=MetodoPagamento.CARTAO, urls=()) -> SolicitacaoPedidoPagamento:
    return SolicitacaoPedidoPagamento(
        referencia='ped-1',
        cliente=ClientePagamento(
            nome='Maria Silva', email='maria@example.com', cpf='123.456.789-09',
            telefones=(TelefonePagamento(pais='55', area='16', numero='991234567'),),
        ),
        itens=(ItemPagamento(referencia='prod-1', nome='Vestido (M/Bege)', quantidade=2, valor_unitario=10000),),
        valor_frete=1400,
        endereco_entrega=EnderecoPagamento(
            rua='Rua das Flores', numero='100', complemento='', bairro='Centro',
            cidade='Ribeirão Preto', estado='SP', cep='14010120',
        ),
        metodo=metodo,
        urls_notificacao=urls,
    )


def resposta(status_code=200, json_data=None, json_erro=None):
    mock = Mock(status_code=status_code, ok=200 <= status_code < 300, text='erro')
    if json_erro:
        mock.json.side_effect = json_erro
    else:
        mock.json.return_value = json_data
    return mock


# ====================================================================
# REPOSITÓRIOS DJANGO
# ====================================================================

class ProdutoRepositoryDjangoTestCase(TestCase):

    def setUp(self):
        self.repository = ProdutoRepositoryDjango()

    def test_salvar_e_buscar_por_id(self):
        """
        Cenário: Um produto salvo é recuperado com as variações e o preço promocional.
        """
        # ACT
        self.repository.salvar(criar_produto(preco_promocional=Decimal('349.90')))
        produto = self.repository.buscar_por_id('prod-1')

        # ASSERT
        self.assertIsInstance(produto, Produto)
        self.assertEqual(produto.tamanhos, ['P', 'M'])
        self.assertEqual(produto.preco_final, Decimal('349.90'))
        self.assertEqual(ProdutoModel.objects.count(), 1)

    def test_buscar_por_id_nao_encontrado(self):
        self.assertIsNone(self.repository.buscar_por_id('id-nao-existente'))

    def test_salvar_atualiza_existente(self):
        self.repository.salvar(criar_produto())

        self.repository.salvar(criar_produto(nome='Vestido Longo', estoque=3))

        model = ProdutoModel.objects.get(pk='prod-1')
        self.assertEqual(model.nome, 'Vestido Longo')
        self.assertEqual(model.estoque, 3)
        self.assertEqual(ProdutoModel.objects.count(), 1)

    def test_deletar(self):
        self.repository.salvar(criar_produto())

        self.repository.deletar('prod-1')

        self.assertFalse(ProdutoModel.objects.exists())
        with self.assertRaises(ProdutoNaoEncontradoError):
            self.repository.deletar('prod-1')

    def test_assinantes_recebem_snapshot_apos_commit(self):
        """
        Cenário: A gravação pelo ORM dispara o sinal, que publica o catálogo completo após o commit.
        """
        # ARRANGE
        callback = Mock()
        cancelar = instances.produto_repo.assinar(callback)
        self.addCleanup(cancelar)

        # ACT
        with self.captureOnCommitCallbacks(execute=True):
            self.repository.salvar(criar_produto())

        # ASSERT
        self.assertEqual(callback.call_args_list[0].args[0], [])
        self.assertEqual([p.id for p in callback.call_args_list[-1].args[0]], ['prod-1'])


class PedidoRepositoryDjangoTestCase(TestCase):

    def setUp(self):
        self.repository = PedidoRepositoryDjango()

    def test_salvar_pedido_com_itens(self):
        salvo = self.repository.salvar(criar_pedido())

        self.assertEqual(len(salvo.itens), 2)
        self.assertEqual(salvo.total, Decimal('889.70'))
        self.assertEqual(salvo.endereco.complemento, 'Ap 3')
        self.assertTrue(salvo.frete.gratis)
        self.assertEqual(PedidoModel.objects.get(pk='ped-1').itens.count(), 2)

    def test_atualizar_status_mantem_itens(self):
        pedido = self.repository.salvar(criar_pedido())
        pedido.status = StatusPedido.PAGO
        pedido.data_pagamento = INSTANTE
        pedido.itens = []

        atualizado = self.repository.salvar(pedido)

        self.assertEqual(atualizado.status, StatusPedido.PAGO)
        self.assertEqual(atualizado.data_pagamento, INSTANTE)
        self.assertEqual(len(atualizado.itens), 2)

    def test_retirada_sem_endereco(self):
        salvo = self.repository.salvar(criar_pedido(metodo_entrega=MetodoEntrega.RETIRADA, endereco=None))

        self.assertIsNone(salvo.endereco)

    def test_listar_por_status_mais_recentes_primeiro(self):
        self.repository.salvar(criar_pedido(id='antigo', data_criacao=INSTANTE - timedelta(days=1)))
        self.repository.salvar(criar_pedido(id='recente'))
        self.repository.salvar(criar_pedido(id='pago', status=StatusPedido.PAGO))

        self.assertEqual(
            [p.id for p in self.repository.listar_todos('aguardando_pagamento')], ['recente', 'antigo']
        )
        self.assertEqual([p.id for p in self.repository.listar_todos('pago')], ['pago'])

    def test_buscar_por_id_nao_encontrado(self):
        self.assertIsNone(self.repository.buscar_por_id('nao-existe'))


class UsuarioRepositoryDjangoTestCase(TestCase):

    def setUp(self):
        self.repository = UsuarioRepositoryDjango()

    def test_salvar_cria_usuario_com_papel(self):
        salvo = self.repository.salvar(Usuario(nome='Ana', email='ana@example.com'))

        model = get_user_model().objects.get(email='ana@example.com')
        self.assertEqual(salvo.id, str(model.pk))
        self.assertEqual(salvo.nome, 'Ana')
        self.assertEqual(salvo.papel, 'user')
        self.assertFalse(model.has_usable_password())

    def test_staff_e_tratado_como_admin(self):
        model = get_user_model().objects.create_user(email='staff@example.com', password='senha-forte', is_staff=True)

        usuario = self.repository.buscar_por_id(str(model.pk))

        self.assertTrue(usuario.eh_admin)

    def test_buscar_por_id_invalido(self):
        self.assertIsNone(self.repository.buscar_por_id('nao-numerico'))
        self.assertIsNone(self.repository.buscar_por_id('999'))


# ====================================================================
# REPOSITÓRIOS EM MEMÓRIA
# ====================================================================

class RepositoriosMemoriaTestCase(SimpleTestCase):

    def test_produto_isolado_por_copia(self):
        repository = ProdutoRepositoryMemoria(banco={})
        produto = criar_produto()
        repository.salvar(produto)

        produto.nome = 'Alterado fora do repositório'
        lido = repository.buscar_por_id('prod-1')
        lido.estoque = 0

        self.assertEqual(repository.buscar_por_id('prod-1').nome, 'Vestido Midi Linho')
        self.assertEqual(repository.buscar_por_id('prod-1').estoque, 20)

    def test_produto_publica_ao_salvar_e_deletar(self):
        repository = ProdutoRepositoryMemoria(banco={})
        callback = Mock()
        repository.assinar(callback)

        repository.salvar(criar_produto())
        repository.deletar('prod-1')

        self.assertEqual([len(c.args[0]) for c in callback.call_args_list], [0, 1, 0])
        with self.assertRaises(ProdutoNaoEncontradoError):
            repository.deletar('prod-1')

    def test_pedido_mantem_itens_e_total_da_criacao(self):
        repository = PedidoRepositoryMemoria(banco={})
        pedido = repository.salvar(criar_pedido())

        pedido.itens = []
        pedido.total = Decimal('1.00')
        pedido.status = StatusPedido.ENVIADO
        atualizado = repository.salvar(pedido)

        self.assertEqual(len(atualizado.itens), 2)
        self.assertEqual(atualizado.total, Decimal('889.70'))
        self.assertEqual([p.id for p in repository.listar_todos('enviado')], ['ped-1'])

    def test_usuario(self):
        repository = UsuarioRepositoryMemoria(banco={})
        repository.salvar(Usuario(id='u-1', nome='Ana', email='ana@example.com'))

        self.assertEqual(repository.buscar_por_id('u-1').email, 'ana@example.com')
        self.assertIsNone(repository.buscar_por_id('u-2'))


# ====================================================================
# ARMAZENAMENTO LOCAL
# ====================================================================

class ArmazenamentoTestCase(SimpleTestCase):

    def test_sessao_marca_modificacao(self):
        sessao = SessionStore()
        armazenamento = ArmazenamentoSessaoDjango(sessao)

        armazenamento.salvar('completa_cart', '[]')

        self.assertEqual(armazenamento.carregar('completa_cart'), '[]')
        self.assertIsNone(armazenamento.carregar('completa_wishlist'))
        self.assertTrue(sessao.modified)

    def test_memoria(self):
        armazenamento = ArmazenamentoMemoria()
        armazenamento.salvar('chave', 'valor')

        self.assertEqual(armazenamento.dados, {'chave': 'valor'})


# ====================================================================
# GATEWAY DE PAGAMENTO (PAGBANK)
# ====================================================================

@override_settings(PAGBANK_TOKEN='token-teste', PAGBANK_ENV='sandbox', PAGBANK_TIMEOUT=15)
class PagBankGatewayTestCase(SimpleTestCase):

    def setUp(self):
        self.gateway = PagBankGateway()

    @patch('completa.infrastructure.gateways.requests.post')
    def test_criar_pedido_envia_payload_em_centavos(self, mock_post):
        """
        Cenário: Pedido de cartão com checkout hospedado; o link PAY volta no resultado.
        """
        # ARRANGE
        mock_post.return_value = resposta(201, {
            'id': 'ORDE_123',
            'links': [
                {'rel': 'SELF', 'href': 'https://sandbox.api.pagseguro.com/orders/ORDE_123'},
                {'rel': 'PAY', 'href': 'https://pagamento.pagbank.com/ORDE_123'},
            ],
        })

        # ACT
        pedido = self.gateway.criar_pedido(
            criar_solicitacao(urls=('https://loja.example.com/api/pagbank/webhook',))
        )

        # ASSERT
        self.assertEqual(pedido.id, 'ORDE_123')
        self.assertEqual(pedido.link_redirecionamento(), 'https://pagamento.pagbank.com/ORDE_123')

        url = mock_post.call_args.args[0]
        kwargs = mock_post.call_args.kwargs
        payload = kwargs['json']
        self.assertEqual(url, 'https://sandbox.api.pagseguro.com/orders')
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer token-teste')
        self.assertEqual(kwargs['timeout'], 15)
        self.assertEqual(payload['amount'], {'value': 21400, 'currency': 'BRL'})
        self.assertEqual(payload['shipping']['amount'], 1400)
        self.assertEqual(payload['customer']['tax_id'], '12345678909')
        self.assertEqual(payload['items'][0]['unit_amount'], 10000)
        self.assertEqual(payload['payment_methods'], [{'type': 'CREDIT_CARD'}])
        self.assertEqual(payload['notification_urls'], ['https://loja.example.com/api/pagbank/webhook'])

    @patch('completa.infrastructure.gateways.requests.post')
    def test_pix_nao_envia_metodos_de_pagamento(self, mock_post):
        mock_post.return_value = resposta(201, {'id': 'ORDE_1'})

        self.gateway.criar_pedido(criar_solicitacao(metodo=MetodoPagamento.PIX))

        payload = mock_post.call_args.kwargs['json']
        self.assertNotIn('payment_methods', payload)
        self.assertNotIn('notification_urls', payload)

    @override_settings(PAGBANK_ENV='production')
    @patch('completa.infrastructure.gateways.requests.post')
    def test_ambiente_de_producao(self, mock_post):
        mock_post.return_value = resposta(201, {'id': 'ORDE_1'})

        self.gateway.criar_pedido(criar_solicitacao())

        self.assertEqual(mock_post.call_args.args[0], 'https://api.pagseguro.com/orders')

    @override_settings(PAGBANK_TOKEN='')
    @patch('completa.infrastructure.gateways.requests.post')
    def test_sem_token_nao_chama_o_provedor(self, mock_post):
        with self.assertLogs('completa.infrastructure.gateways', level='ERROR'):
            with self.assertRaises(ConfiguracaoServidorError):
                self.gateway.criar_pedido(criar_solicitacao())
        mock_post.assert_not_called()

    @patch('completa.infrastructure.gateways.requests.post')
    def test_erro_do_provedor_carrega_status_e_detalhes(self, mock_post):
        erros = [{'code': '40002', 'description': 'invalid_parameter', 'parameter_name': 'customer.tax_id'}]
        mock_post.return_value = resposta(400, {'error_messages': erros})

        with self.assertLogs('completa.infrastructure.gateways', level='ERROR'):
            with self.assertRaises(ProvedorPagamentoError) as contexto:
                self.gateway.criar_pedido(criar_solicitacao())

        self.assertEqual(contexto.exception.status_code, 400)
        self.assertEqual(contexto.exception.detalhes, erros)

    @patch('completa.infrastructure.gateways.requests.post')
    def test_falha_de_rede(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout('tempo esgotado')

        with self.assertLogs('completa.infrastructure.gateways', level='ERROR'):
            with self.assertRaises(FalhaComunicacaoPagamentoError):
                self.gateway.criar_pedido(criar_solicitacao())

    @patch('completa.infrastructure.gateways.requests.post')
    def test_corpo_ilegivel(self, mock_post):
        mock_post.return_value = resposta(200, json_erro=ValueError('não é JSON'))

        with self.assertLogs('completa.infrastructure.gateways', level='ERROR'):
            with self.assertRaises(FalhaComunicacaoPagamentoError):
                self.gateway.criar_pedido(criar_solicitacao())

    @patch('completa.infrastructure.gateways.requests.post')
    def test_erro_com_corpo_html_mantem_status(self, mock_post):
        """
        Cenário: O provedor responde 502 com uma página HTML; o status chega ao erro.
        """
        # ARRANGE
        mock_post.return_value = resposta(502, json_erro=ValueError('não é JSON'))
        mock_post.return_value.text = '<html>Bad Gateway</html>'

        # ACT
        with self.assertLogs('completa.infrastructure.gateways', level='ERROR'):
            with self.assertRaises(ProvedorPagamentoError) as contexto:
                self.gateway.criar_pedido(criar_solicitacao())

        # ASSERT
        self.assertEqual(contexto.exception.status_code, 502)
        self.assertEqual(contexto.exception.detalhes, '<html>Bad Gateway</html>')

    @patch('completa.infrastructure.gateways.requests.post')
    def test_resposta_sem_id(self, mock_post):
        mock_post.return_value = resposta(201, {'links': []})

        with self.assertLogs('completa.infrastructure.gateways', level='ERROR'):
            with self.assertRaises(RespostaInvalidaProvedorError):
                self.gateway.criar_pedido(criar_solicitacao())

    @patch('completa.infrastructure.gateways.requests.post')
    def test_cobranca_pix_via_qr_codes(self, mock_post):
        # ARRANGE
        expira_em = INSTANTE + timedelta(minutes=30)
        mock_post.return_value = resposta(201, {
            'id': 'ORDE_1',
            'qr_codes': [{
                'id': 'QRCO_1',
                'text': '00020101021226830014br.gov.bcb.pix',
                'expiration_date': '2025-03-10T11:30:00-03:00',
                'links': [
                    {'rel': 'QRCODE.BASE64', 'href': 'https://api/qrcode/QRCO_1/base64'},
                    {'rel': 'QRCODE.PNG', 'href': 'https://api/qrcode/QRCO_1/png'},
                ],
            }],
        })

        # ACT
        cobranca = self.gateway.criar_cobranca_pix('ORDE_1', 21400, expira_em)

        # ASSERT
        self.assertEqual(mock_post.call_args.args[0], 'https://sandbox.api.pagseguro.com/orders/ORDE_1/pay')
        cobranca_enviada = mock_post.call_args.kwargs['json']['charges'][0]
        self.assertEqual(cobranca_enviada['amount']['value'], 21400)
        self.assertEqual(cobranca_enviada['payment_method']['type'], 'PIX')
        self.assertEqual(cobranca_enviada['payment_method']['pix']['expiration_date'], expira_em.isoformat())

        self.assertEqual(cobranca.id, 'QRCO_1')
        self.assertEqual(cobranca.codigo, '00020101021226830014br.gov.bcb.pix')
        self.assertEqual(cobranca.qr_code_url, 'https://api/qrcode/QRCO_1/png')
        self.assertEqual(cobranca.expira_em, expira_em)

    @patch('completa.infrastructure.gateways.requests.post')
    def test_cobranca_pix_dentro_da_cobranca(self, mock_post):
        mock_post.return_value = resposta(201, {
            'charges': [{'payment_method': {'type': 'PIX', 'pix': {'text': 'codigo-pix'}}}],
        })

        cobranca = self.gateway.criar_cobranca_pix('ORDE_1', 1000, INSTANTE)

        self.assertEqual(cobranca.codigo, 'codigo-pix')
        self.assertIsNone(cobranca.qr_code_url)
        self.assertIsNone(cobranca.expira_em)

    @patch('completa.infrastructure.gateways.requests.post')
    def test_cobranca_pix_sem_codigo(self, mock_post):
        mock_post.return_value = resposta(201, {'id': 'ORDE_1', 'qr_codes': []})

        with self.assertLogs('completa.infrastructure.gateways', level='ERROR'):
            with self.assertRaises(RespostaInvalidaProvedorError):
                self.gateway.criar_cobranca_pix('ORDE_1', 1000, INSTANTE)


# ====================================================================
# CONSULTA DE CEP (VIACEP)
# ====================================================================

class ViaCepGatewayTestCase(SimpleTestCase):

    def setUp(self):
        self.gateway = ViaCepGateway()

    @patch('completa.infrastructure.gateways.requests.get')
    def test_buscar_endereco(self, mock_get):
        mock_get.return_value = resposta(200, {
            'cep': '14010-120', 'logradouro': 'Rua Barão do Amazonas', 'complemento': '',
            'bairro': 'Centro', 'localidade': 'Ribeirão Preto', 'uf': 'SP',
        })

        endereco = self.gateway.buscar_endereco('14010-120')

        mock_get.assert_called_once_with('https://viacep.com.br/ws/14010120/json/', timeout=10)
        self.assertEqual(endereco.cidade, 'Ribeirão Preto')
        self.assertEqual(endereco.numero, '')
        self.assertIsNone(endereco.complemento)

    @patch('completa.infrastructure.gateways.requests.get')
    def test_cep_inexistente_ou_invalido(self, mock_get):
        mock_get.return_value = resposta(200, {'erro': True})

        self.assertIsNone(self.gateway.buscar_endereco('99999999'))
        self.assertIsNone(self.gateway.buscar_endereco('123'))
        self.assertEqual(mock_get.call_count, 1)

    @patch('completa.infrastructure.gateways.requests.get')
    def test_falha_de_rede_retorna_none(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError()

        with self.assertLogs('completa.infrastructure.gateways', level='ERROR'):
            self.assertIsNone(self.gateway.buscar_endereco('14010120'))


# ====================================================================
# UPLOAD DE IMAGENS (GITHUB)
# ====================================================================

@override_settings(GITHUB_TOKEN='gh-token', GITHUB_ASSETS_REPO='loja/assets', GITHUB_ASSETS_BRANCH='main')
class GitHubImagemGatewayTestCase(SimpleTestCase):

    def setUp(self):
        self.gateway = GitHubImagemGateway()

    @patch('completa.infrastructure.gateways.time.time', return_value=1700000000.0)
    @patch('completa.infrastructure.gateways.requests.put')
    def test_enviar_devolve_url_do_cdn(self, mock_put, _mock_time):
        mock_put.return_value = resposta(201, {'content': {}})

        url = self.gateway.enviar('data:image/png;base64,aGVsbG8=', 'foto.png')

        self.assertEqual(url, 'https://cdn.jsdelivr.net/gh/loja/assets@main/public/products/1700000000000-foto.png')
        self.assertEqual(
            mock_put.call_args.args[0],
            'https://api.github.com/repos/loja/assets/contents/public/products/1700000000000-foto.png',
        )
        corpo = mock_put.call_args.kwargs['json']
        self.assertEqual(corpo['content'], 'aGVsbG8=')
        self.assertEqual(corpo['branch'], 'main')

    @patch('completa.infrastructure.gateways.requests.put')
    def test_base64_invalido(self, mock_put):
        with self.assertRaises(UploadImagemError):
            self.gateway.enviar('não é base64!')
        mock_put.assert_not_called()

    @patch('completa.infrastructure.gateways.requests.put')
    def test_erro_da_api(self, mock_put):
        mock_put.return_value = resposta(422, {'message': 'sha wasn\'t supplied'})

        with self.assertLogs('completa.infrastructure.gateways', level='ERROR'):
            with self.assertRaises(UploadImagemError) as contexto:
                self.gateway.enviar('aGVsbG8=')

        self.assertEqual(contexto.exception.detalhes, {'message': 'sha wasn\'t supplied'})

    @override_settings(GITHUB_TOKEN='')
    def test_sem_token(self):
        with self.assertLogs('completa.infrastructure.gateways', level='ERROR'):
            with self.assertRaises(ConfiguracaoServidorError):
                self.gateway.enviar('aGVsbG8=')


# ====================================================================
# COMANDOS DE GERENCIAMENTO
# ====================================================================

class ComandosTestCase(TestCase):

    def test_carregar_catalogo_inicial_e_idempotente(self):
        saida = StringIO()

        call_command('carregar_catalogo_inicial', stdout=saida)
        call_command('carregar_catalogo_inicial', stdout=saida)

        self.assertEqual(ProdutoModel.objects.count(), 2)
        self.assertIn('já existe', saida.getvalue())
        blusa = ProdutoModel.objects.get(nome='Blusa Seda Off-White')
        self.assertEqual(blusa.preco_promocional, Decimal('249.90'))

    @patch('completa.infrastructure.management.commands.aguardar_banco.time.sleep')
    @patch('completa.infrastructure.management.commands.aguardar_banco.connections')
    def test_aguardar_banco(self, mock_connections, mock_sleep):
        conexao = Mock()
        conexao.ensure_connection.side_effect = [OperationalError(), None]
        mock_connections.__getitem__ = MagicMock(return_value=conexao)

        call_command('aguardar_banco', stdout=StringIO())

        self.assertEqual(conexao.ensure_connection.call_count, 2)
        mock_sleep.assert_called_once_with(1.0)

    @patch('completa.infrastructure.management.commands.aguardar_banco.time.sleep')
    @patch('completa.infrastructure.management.commands.aguardar_banco.connections')
    def test_aguardar_banco_esgota_tentativas(self, mock_connections, _mock_sleep):
        conexao = Mock()
        conexao.ensure_connection.side_effect = OperationalError()
        mock_connections.__getitem__ = MagicMock(return_value=conexao)

        with self.assertRaises(CommandError):
            call_command('aguardar_banco', '--tentativas', '2', stdout=StringIO())
