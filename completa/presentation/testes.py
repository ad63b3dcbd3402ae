from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from completa.catalog.models import Produto as ProdutoModel
from completa.core.exceptions import ProvedorPagamentoError
from completa.core.pagamento import CobrancaPix, LinkProvedor, PedidoProvedor
from completa.vendas.models import Pedido as PedidoModel

INSTANTE = datetime(2025, 3, 10, 14, 0, tzinfo=timezone.utc)

DADOS_CHECKOUT = {
    'cliente': {
        'nome': 'Maria Silva',
        'email': 'maria@example.com',
        'telefone': '(16) 99123-4567',
        'cpf': '123.456.789-09',
    },
    'metodo_entrega': 'ENTREGA',
    'metodo_pagamento': 'PIX',
    'endereco': {
        'cep': '14010-120',
        'rua': 'Rua das Flores',
        'numero': '100',
        'bairro': 'Centro',
        'cidade': 'Ribeirão Preto',
        'estado': 'SP',
    },
}


class LojaAPITestCase(APITestCase):
    """Base com um catálogo mínimo no banco de teste."""

    def setUp(self):
        self.vestido = ProdutoModel.objects.create(
            id='vestido-1', nome='Vestido Midi Linho', categoria='Vestidos', preco=Decimal('100.00'),
            tamanhos=['P', 'M'], cores=['Bege'], estoque=10, lancamento=True,
        )
        self.blusa = ProdutoModel.objects.create(
            id='blusa-1', nome='Blusa Seda', categoria='Blusas', preco=Decimal('150.00'),
            preco_promocional=Decimal('120.00'), tamanhos=['P'], cores=['Branco'], estoque=2,
            mais_vendido=True,
        )
        ProdutoModel.objects.create(id='saia-1', nome='Saia Plissada', categoria='Saias', preco=Decimal('90.00'), ativo=False)

    def adicionar_ao_carrinho(self, produto_id='vestido-1', tamanho='M', cor='Bege', quantidade=1):
        return self.client.post(
            reverse('api_carrinho'),
            {'produto_id': produto_id, 'tamanho': tamanho, 'cor': cor, 'quantidade': quantidade},
            format='json',
        )


# ====================================================================
# CATÁLOGO
# ====================================================================

class CatalogoAPITestCase(LojaAPITestCase):

    def test_listar_somente_ativos_com_filtros(self):
        resposta = self.client.get(reverse('api_produtos'))
        self.assertEqual(resposta.status_code, status.HTTP_200_OK)
        self.assertEqual({p['id'] for p in resposta.data}, {'vestido-1', 'blusa-1'})

        resposta = self.client.get(reverse('api_produtos'), {'cores': 'Branco,Preto', 'ordenacao': 'price_asc'})
        self.assertEqual([p['id'] for p in resposta.data], ['blusa-1'])
        self.assertEqual(resposta.data[0]['preco_final'], '120.00')

    def test_ordenacao_invalida(self):
        resposta = self.client.get(reverse('api_produtos'), {'ordenacao': 'aleatoria'})

        self.assertEqual(resposta.status_code, status.HTTP_400_BAD_REQUEST)

    def test_detalhe_de_produto_inativo(self):
        resposta = self.client.get(reverse('api_produto_detalhe', args=['saia-1']))

        self.assertEqual(resposta.status_code, status.HTTP_404_NOT_FOUND)

    def test_vitrines(self):
        resposta = self.client.get(reverse('api_vitrines'))

        self.assertEqual([p['id'] for p in resposta.data['lancamentos']], ['vestido-1'])
        self.assertEqual([p['id'] for p in resposta.data['mais_vendidos']], ['blusa-1'])


# ====================================================================
# CARRINHO, LISTA DE DESEJOS E FRETE
# ====================================================================

class CarrinhoAPITestCase(LojaAPITestCase):

    def test_adicionar_mesma_variacao_soma_quantidade(self):
        """
        Cenário: A primeira adição cria a linha (o carrinho abre); a segunda só soma.
        """
        # ACT
        primeira = self.adicionar_ao_carrinho(quantidade=1)
        segunda = self.adicionar_ao_carrinho(quantidade=2)

        # ASSERT
        self.assertEqual(primeira.status_code, status.HTTP_201_CREATED)
        self.assertTrue(primeira.data['abrir_carrinho'])
        self.assertFalse(segunda.data['abrir_carrinho'])
        carrinho = self.client.get(reverse('api_carrinho')).data
        self.assertEqual(len(carrinho['itens']), 1)
        self.assertEqual(carrinho['contagem'], 3)
        self.assertEqual(carrinho['total'], '300.00')

    def test_variacao_indisponivel(self):
        resposta = self.adicionar_ao_carrinho(tamanho='GG')

        self.assertEqual(resposta.status_code, status.HTTP_400_BAD_REQUEST)

    def test_quantidade_zero_e_recusada_e_linha_mantida(self):
        self.adicionar_ao_carrinho(quantidade=2)

        resposta = self.client.patch(
            reverse('api_carrinho'),
            {'produto_id': 'vestido-1', 'tamanho': 'M', 'cor': 'Bege', 'quantidade': 0},
            format='json',
        )

        self.assertEqual(resposta.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get(reverse('api_carrinho')).data['contagem'], 2)

    def test_remover_linha_e_esvaziar(self):
        self.adicionar_ao_carrinho()
        self.adicionar_ao_carrinho('blusa-1', 'P', 'Branco')

        resposta = self.client.delete(
            reverse('api_carrinho'), {'produto_id': 'vestido-1', 'tamanho': 'M', 'cor': 'Bege'}, format='json'
        )
        self.assertEqual([i['produto']['id'] for i in resposta.data['carrinho']['itens']], ['blusa-1'])

        resposta = self.client.delete(reverse('api_carrinho'))
        self.assertEqual(resposta.data['carrinho']['itens'], [])

    def test_lista_de_desejos_sem_duplicados(self):
        primeira = self.client.post(reverse('api_lista_desejos'), {'produto_id': 'vestido-1'}, format='json')
        segunda = self.client.post(reverse('api_lista_desejos'), {'produto_id': 'vestido-1'}, format='json')

        self.assertEqual(primeira.status_code, status.HTTP_201_CREATED)
        self.assertEqual(segunda.status_code, status.HTTP_200_OK)
        self.assertEqual(segunda.data['contagem'], 1)

    def test_cotacao_de_frete(self):
        self.adicionar_ao_carrinho(quantidade=1)

        resposta = self.client.post(reverse('api_frete'), {'cep': '22041-001'}, format='json')

        self.assertEqual(resposta.data['preco'], '19.00')
        self.assertEqual(resposta.data['dias'], 4)
        self.assertTrue(resposta.data['disponivel'])

    def test_frete_gratis_e_cep_invalido(self):
        self.adicionar_ao_carrinho(quantidade=2)

        gratis = self.client.post(reverse('api_frete'), {'cep': '14010120'}, format='json')
        invalido = self.client.post(reverse('api_frete'), {'cep': '1401'}, format='json')

        self.assertTrue(gratis.data['gratis'])
        self.assertEqual(gratis.data['preco'], '0.00')
        self.assertFalse(invalido.data['disponivel'])
        self.assertIsNone(invalido.data['preco'])

    @patch('completa.infrastructure.instances.consulta_cep')
    def test_consulta_de_cep_nao_encontrado(self, mock_consulta):
        mock_consulta.buscar_endereco.return_value = None

        resposta = self.client.get(reverse('api_cep', args=['99999999']))

        self.assertEqual(resposta.status_code, status.HTTP_404_NOT_FOUND)


# ====================================================================
# CHECKOUT
# ====================================================================

@patch('completa.infrastructure.instances.pagamento_gateway')
class CheckoutAPITestCase(LojaAPITestCase):

    def test_checkout_pix_registra_pedido_e_esvazia_carrinho(self, mock_gateway):
        """
        Cenário: Checkout PIX aceito pelo provedor; o carrinho é esvaziado e o pedido fica aguardando pagamento.
        """
        # ARRANGE
        self.adicionar_ao_carrinho(quantidade=1)
        mock_gateway.criar_pedido.return_value = PedidoProvedor(id='ORDE_1')
        mock_gateway.criar_cobranca_pix.return_value = CobrancaPix(
            id='QRCO_1', codigo='000201pix', qr_code_url='https://qr/png',
            expira_em=INSTANTE + timedelta(minutes=30),
        )

        # ACT
        resposta = self.client.post(reverse('api_checkout'), DADOS_CHECKOUT, format='json')

        # ASSERT
        self.assertEqual(resposta.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resposta.data['tipo'], 'PIX')
        self.assertEqual(resposta.data['codigo'], '000201pix')
        self.assertEqual(resposta.data['pedido']['total'], '114.00')
        self.assertEqual(resposta.data['pedido']['status'], 'aguardando_pagamento')

        solicitacao = mock_gateway.criar_pedido.call_args.args[0]
        self.assertEqual(solicitacao.urls_notificacao, ('https://testserver/api/pagbank/webhook',))
        mock_gateway.criar_cobranca_pix.assert_called_once()

        pedido = PedidoModel.objects.get()
        self.assertEqual(pedido.pedido_provedor_id, 'ORDE_1')
        self.assertEqual(pedido.itens.count(), 1)
        self.assertEqual(self.client.get(reverse('api_carrinho')).data['itens'], [])

    def test_checkout_cartao_devolve_link(self, mock_gateway):
        self.adicionar_ao_carrinho()
        mock_gateway.criar_pedido.return_value = PedidoProvedor(
            id='ORDE_2', links=(LinkProvedor('PAY', 'https://pagbank/pay/ORDE_2'),)
        )

        resposta = self.client.post(
            reverse('api_checkout'), {**DADOS_CHECKOUT, 'metodo_pagamento': 'CARTAO'}, format='json'
        )

        self.assertEqual(resposta.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resposta.data['tipo'], 'REDIRECIONAMENTO')
        self.assertEqual(resposta.data['url_redirecionamento'], 'https://pagbank/pay/ORDE_2')

    def test_carrinho_vazio_nao_chama_o_provedor(self, mock_gateway):
        resposta = self.client.post(reverse('api_checkout'), DADOS_CHECKOUT, format='json')

        self.assertEqual(resposta.status_code, status.HTTP_400_BAD_REQUEST)
        mock_gateway.criar_pedido.assert_not_called()

    def test_corpo_vazio_com_carrinho_vazio_aponta_o_carrinho(self, mock_gateway):
        """
        Cenário: Sem cliente e sem método de entrega, o carrinho vazio ainda é o primeiro erro informado.
        """
        for rota in ('api_checkout', 'api_checkout_whatsapp'):
            with self.subTest(rota=rota):
                resposta = self.client.post(reverse(rota), {}, format='json')

                self.assertEqual(resposta.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn('carrinho vazio', resposta.data['message'])
        mock_gateway.criar_pedido.assert_not_called()

    def test_corpo_vazio_com_itens_aponta_dados_do_cliente(self, mock_gateway):
        self.adicionar_ao_carrinho()

        resposta = self.client.post(reverse('api_checkout'), {'metodo_pagamento': 'PIX'}, format='json')

        self.assertEqual(resposta.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('nome', resposta.data['message'])
        mock_gateway.criar_pedido.assert_not_called()

    def test_endereco_incompleto(self, mock_gateway):
        self.adicionar_ao_carrinho()
        dados = {**DADOS_CHECKOUT, 'endereco': {**DADOS_CHECKOUT['endereco'], 'numero': ''}}

        resposta = self.client.post(reverse('api_checkout'), dados, format='json')

        self.assertEqual(resposta.status_code, status.HTTP_400_BAD_REQUEST)
        mock_gateway.criar_pedido.assert_not_called()

    def test_erro_do_provedor_repassa_status_e_mantem_carrinho(self, mock_gateway):
        self.adicionar_ao_carrinho()
        erros = [{'code': '40002', 'description': 'invalid_parameter'}]
        mock_gateway.criar_pedido.side_effect = ProvedorPagamentoError(422, erros)

        resposta = self.client.post(reverse('api_checkout'), DADOS_CHECKOUT, format='json')

        self.assertEqual(resposta.status_code, 422)
        self.assertEqual(resposta.data['detalhes'], erros)
        self.assertFalse(PedidoModel.objects.exists())
        self.assertEqual(self.client.get(reverse('api_carrinho')).data['contagem'], 1)

    def test_pedido_pelo_whatsapp(self, mock_gateway):
        self.adicionar_ao_carrinho()
        dados = {'cliente': DADOS_CHECKOUT['cliente'], 'metodo_entrega': 'RETIRADA'}

        resposta = self.client.post(reverse('api_checkout_whatsapp'), dados, format='json')

        self.assertEqual(resposta.status_code, status.HTTP_201_CREATED)
        self.assertTrue(resposta.data['url_whatsapp'].startswith('https://wa.me/5516999999999?text='))
        self.assertEqual(resposta.data['pedido']['metodo_pagamento'], 'WHATSAPP')
        self.assertIsNone(resposta.data['pedido']['endereco'])
        mock_gateway.criar_pedido.assert_not_called()


# ====================================================================
# PAINEL ADMINISTRATIVO
# ====================================================================

class PainelAdminAPITestCase(LojaAPITestCase):

    def setUp(self):
        super().setUp()
        Usuario = get_user_model()
        self.admin = Usuario.objects.create_user(email='admin@example.com', password='senha-admin', papel='admin')
        self.cliente = Usuario.objects.create_user(email='cliente@example.com', password='senha-cliente')

    def criar_pedido(self):
        self.adicionar_ao_carrinho()
        with patch('completa.infrastructure.instances.pagamento_gateway') as gateway:
            gateway.criar_pedido.return_value = PedidoProvedor(id='ORDE_1')
            gateway.criar_cobranca_pix.return_value = CobrancaPix('QRCO_1', 'pix', None, None)
            resposta = self.client.post(reverse('api_checkout'), DADOS_CHECKOUT, format='json')
        return resposta.data['pedido']['id']

    def test_acesso_negado_para_nao_administradores(self):
        anonimo = self.client.get(reverse('api_admin_painel'))
        self.client.force_authenticate(user=self.cliente)
        cliente = self.client.get(reverse('api_admin_painel'))

        self.assertEqual(anonimo.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(cliente.status_code, status.HTTP_403_FORBIDDEN)

    def test_painel(self):
        self.client.force_authenticate(user=self.admin)

        resposta = self.client.get(reverse('api_admin_painel'))

        self.assertEqual(resposta.status_code, status.HTTP_200_OK)
        self.assertEqual(resposta.data['total_produtos'], 3)
        self.assertEqual(resposta.data['estoque_baixo'], 2)
        self.assertEqual(resposta.data['total_pedidos'], 0)

    def test_crud_de_produto(self):
        self.client.force_authenticate(user=self.admin)

        criado = self.client.post(reverse('api_admin_produtos'), {
            'nome': 'Calça Pantalona', 'preco': '259.90', 'categoria': 'Calças',
            'tamanhos': ['38', '40'], 'cores': ['Preto'], 'estoque': 8,
        }, format='json')
        self.assertEqual(criado.status_code, status.HTTP_201_CREATED)
        produto_id = criado.data['id']

        atualizado = self.client.put(
            reverse('api_admin_produto', args=[produto_id]), {'preco_promocional': '199.90'}, format='json'
        )
        self.assertEqual(atualizado.data['preco_final'], '199.90')

        alternado = self.client.post(reverse('api_admin_produto_alternar', args=[produto_id, 'ativo']))
        self.assertFalse(alternado.data['ativo'])

        listagem = self.client.get(reverse('api_admin_produtos'))
        self.assertIn(produto_id, [p['id'] for p in listagem.data])

        removido = self.client.delete(reverse('api_admin_produto', args=[produto_id]))
        self.assertEqual(removido.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ProdutoModel.objects.filter(pk=produto_id).exists())

    def test_preco_promocional_invalido(self):
        self.client.force_authenticate(user=self.admin)

        resposta = self.client.put(
            reverse('api_admin_produto', args=['vestido-1']), {'preco_promocional': '100.00'}, format='json'
        )

        self.assertEqual(resposta.status_code, status.HTTP_400_BAD_REQUEST)

    @patch('completa.infrastructure.instances.armazenamento_imagens')
    def test_envio_de_imagem(self, mock_armazenamento):
        mock_armazenamento.enviar.return_value = 'https://cdn.jsdelivr.net/gh/loja/assets@main/public/products/1-foto.jpg'
        self.client.force_authenticate(user=self.admin)

        resposta = self.client.post(
            reverse('api_admin_imagens'), {'arquivo': 'aGVsbG8=', 'nome_arquivo': 'foto.jpg'}, format='json'
        )

        self.assertEqual(resposta.status_code, status.HTTP_201_CREATED)
        self.assertTrue(resposta.data['imagem_url'].endswith('1-foto.jpg'))
        mock_armazenamento.enviar.assert_called_once_with('aGVsbG8=', 'foto.jpg')

    def test_marcar_pago_e_depois_enviado(self):
        """
        Cenário: 'pago' grava a data de pagamento; 'enviado' a limpa.
        """
        # ARRANGE
        pedido_id = self.criar_pedido()
        self.client.force_authenticate(user=self.admin)
        url = reverse('api_admin_pedido_status', args=[pedido_id])

        # ACT
        pago = self.client.post(url, {'status': 'pago'}, format='json')
        enviado = self.client.post(url, {'status': 'enviado'}, format='json')

        # ASSERT
        self.assertEqual(pago.data['status'], 'pago')
        self.assertIsNotNone(pago.data['data_pagamento'])
        self.assertEqual(enviado.data['status'], 'enviado')
        self.assertIsNone(enviado.data['data_pagamento'])
        self.assertEqual(PedidoModel.objects.get(pk=pedido_id).status, 'enviado')

    def test_status_invalido_e_pedido_inexistente(self):
        pedido_id = self.criar_pedido()
        self.client.force_authenticate(user=self.admin)

        invalido = self.client.post(
            reverse('api_admin_pedido_status', args=[pedido_id]), {'status': 'devolvido'}, format='json'
        )
        inexistente = self.client.post(
            reverse('api_admin_pedido_status', args=['nao-existe']), {'status': 'pago'}, format='json'
        )

        self.assertEqual(invalido.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(inexistente.status_code, status.HTTP_404_NOT_FOUND)

    def test_listar_buscar_e_definir_link(self):
        pedido_id = self.criar_pedido()
        self.client.force_authenticate(user=self.admin)

        por_nome = self.client.get(reverse('api_admin_pedidos'), {'busca': 'maria'})
        por_status = self.client.get(reverse('api_admin_pedidos'), {'status': 'pago'})
        link = self.client.post(
            reverse('api_admin_pedido_link', args=[pedido_id]), {'link': 'https://pag.ae/abc'}, format='json'
        )

        self.assertEqual([p['id'] for p in por_nome.data], [pedido_id])
        self.assertEqual(por_status.data, [])
        self.assertEqual(link.data['link_pagamento'], 'https://pag.ae/abc')


# ====================================================================
# CADASTRO E PERFIL
# ====================================================================

class UsuarioAPITestCase(APITestCase):

    def test_cadastro_cria_usuario_comum_e_permite_login(self):
        resposta = self.client.post(reverse('api_cadastro'), {
            'nome': 'Ana Souza', 'email': 'Ana@Example.com', 'senha': 'senha-segura',
        }, format='json')

        self.assertEqual(resposta.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resposta.data['papel'], 'user')
        self.assertEqual(resposta.data['email'], 'ana@example.com')

        token = self.client.post(
            reverse('token_obtain_pair'), {'email': 'ana@example.com', 'password': 'senha-segura'}, format='json'
        )
        self.assertEqual(token.status_code, status.HTTP_200_OK)
        self.assertIn('access', token.data)

    def test_cadastro_com_email_repetido(self):
        get_user_model().objects.create_user(email='ana@example.com', password='senha-segura')

        resposta = self.client.post(reverse('api_cadastro'), {
            'nome': 'Ana', 'email': 'ANA@example.com', 'senha': 'outra-senha',
        }, format='json')

        self.assertEqual(resposta.status_code, status.HTTP_400_BAD_REQUEST)

    def test_sincronizar_mantem_papel_existente(self):
        admin = get_user_model().objects.create_user(
            email='admin@example.com', password='senha-admin', first_name='Gerente', papel='admin'
        )
        self.client.force_authenticate(user=admin)

        resposta = self.client.post(reverse('api_sincronizar_usuario'), {'nome': 'Outro'}, format='json')

        self.assertEqual(resposta.status_code, status.HTTP_200_OK)
        self.assertEqual(resposta.data['papel'], 'admin')
        self.assertEqual(resposta.data['nome'], 'Gerente')

    def test_sincronizar_exige_autenticacao(self):
        resposta = self.client.post(reverse('api_sincronizar_usuario'), {}, format='json')

        self.assertEqual(resposta.status_code, status.HTTP_401_UNAUTHORIZED)
