# completa/core/testes.py

import json
import unittest
from unittest.mock import Mock
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from urllib.parse import unquote

from completa.core.entities import (
    Carrinho, Cliente, Endereco, ItemCarrinho, ItemPedido, MetodoEntrega, MetodoPagamento,
    OpcaoFrete, Pedido, Produto, StatusPedido, Usuario, para_centavos,
)
from completa.core.eventos import Notificador
from completa.core.exceptions import (
    CarrinhoVazioError,
    DadosClienteIncompletosError,
    DadosInvalidosError,
    EnderecoIncompletoError,
    FreteIndisponivelError,
    ItemNaoEncontradoError,
    MetodoPagamentoInvalidoError,
    PedidoNaoEncontradoError,
    PrecoPromocionalInvalidoError,
    ProdutoNaoEncontradoError,
    QuantidadeInvalidaError,
    SemLinkPagamentoError,
    StatusInvalidoError,
)
from completa.core.frete import (
    SobretaxaPorPeso, SobretaxaPorVolume, calcular_frete, faixa_por_cep, obter_sobretaxa,
)
from completa.core.pagamento import CobrancaPix, LinkProvedor, PedidoProvedor
from completa.core.use_cases import (
    ConsultarCepUseCase,
    CotarFreteUseCase,
    EnviarImagemProdutoUseCase,
    GerenciarCarrinhoUseCase,
    GerenciarListaDesejosUseCase,
    GerenciarPedidosAdminUseCase,
    GerenciarProdutosAdminUseCase,
    IniciarCheckoutUseCase,
    ListarProdutosUseCase,
    RegistrarPedidoWhatsappUseCase,
    SincronizarUsuarioUseCase,
    CAMPOS_CLIENTE,
    CAMPOS_ENDERECO,
    formatar_moeda,
    validar_dados_checkout,
)

INSTANTE = datetime(2025, 3, 10, 14, 0, tzinfo=timezone.utc)


def criar_produto(**kwargs) -> Produto:
    dados = dict(
        id='prod-1', nome='Vestido Midi Linho', preco=Decimal('100.00'),
        categoria='Vestidos', tamanhos=['P', 'M'], cores=['Bege'], estoque=10,
    )
    dados.update(kwargs)
    return Produto(**dados)


def criar_cliente(**kwargs) -> Cliente:
    dados = dict(nome='Maria Silva', email='maria@example.com', telefone='(16) 99123-4567', cpf='123.456.789-09')
    dados.update(kwargs)
    return Cliente(**dados)


def criar_endereco(**kwargs) -> Endereco:
    dados = dict(
        cep='14010-120', rua='Rua das Flores', numero='100', bairro='Centro',
        cidade='Ribeirão Preto', estado='SP',
    )
    dados.update(kwargs)
    return Endereco(**dados)


def criar_pedido(**kwargs) -> Pedido:
    dados = dict(
        cliente=criar_cliente(),
        itens=[ItemPedido('prod-1', 'Vestido', 1, Decimal('100.00'), 'M', 'Bege')],
        frete=OpcaoFrete('Entrega Padrão', Decimal('14.00'), 2),
        subtotal=Decimal('100.00'),
        total=Decimal('114.00'),
        metodo_entrega=MetodoEntrega.ENTREGA,
        metodo_pagamento=MetodoPagamento.PIX,
        endereco=criar_endereco(),
    )
    dados.update(kwargs)
    return Pedido(**dados)


# ====================================================================
# ENTIDADES
# ====================================================================

class TestProduto(unittest.TestCase):

    def test_preco_promocional_deve_ser_menor_que_preco(self):
        """
        Cenário: Promoção igual ou maior que o preço base é recusada.
        """
        with self.assertRaises(PrecoPromocionalInvalidoError):
            criar_produto(preco_promocional=Decimal('100.00'))
        with self.assertRaises(PrecoPromocionalInvalidoError):
            criar_produto(preco_promocional=Decimal('120.00'))

    def test_promocao_zerada_equivale_a_sem_promocao(self):
        produto = criar_produto(preco_promocional=Decimal('0'))

        self.assertIsNone(produto.preco_promocional)
        self.assertEqual(produto.preco_final, Decimal('100.00'))

    def test_preco_final_usa_promocao(self):
        produto = criar_produto(preco_promocional=Decimal('79.90'))

        self.assertEqual(produto.preco_final, Decimal('79.90'))
        self.assertEqual(produto.desconto, Decimal('0.201'))

    def test_conversao_para_dict_e_de_volta(self):
        produto = criar_produto(preco_promocional=Decimal('89.90'), marca='Completa')

        copia = Produto.de_dict(json.loads(json.dumps(produto.para_dict())))

        self.assertEqual(copia, produto)


class TestCarrinho(unittest.TestCase):

    def setUp(self):
        self.carrinho = Carrinho()
        self.produto = criar_produto()

    def test_mesma_variacao_soma_na_mesma_linha(self):
        """
        Cenário: Adicionar duas vezes o mesmo (produto, tamanho, cor) não cria linha nova.
        """
        # ACT
        primeira = self.carrinho.adicionar(self.produto, 'M', 'Bege', 1)
        segunda = self.carrinho.adicionar(self.produto, 'M', 'Bege', 2)

        # ASSERT
        self.assertTrue(primeira)
        self.assertFalse(segunda)
        self.assertEqual(len(self.carrinho.itens), 1)
        self.assertEqual(self.carrinho.itens[0].quantidade, 3)

    def test_variacoes_diferentes_geram_linhas_separadas(self):
        self.carrinho.adicionar(self.produto, 'M', 'Bege')
        self.carrinho.adicionar(self.produto, 'P', 'Bege')

        self.assertEqual(len(self.carrinho.itens), 2)
        self.assertEqual(self.carrinho.contagem, 2)

    def test_total_usa_preco_promocional(self):
        promocional = criar_produto(id='prod-2', preco_promocional=Decimal('59.90'))
        self.carrinho.adicionar(self.produto, 'M', 'Bege', 2)
        self.carrinho.adicionar(promocional, 'P', 'Bege', 1)

        self.assertEqual(self.carrinho.total, Decimal('259.90'))

    def test_quantidade_abaixo_de_um_e_recusada_e_linha_mantida(self):
        """
        Cenário: Definir quantidade 0 não remove a linha; a remoção é explícita.
        """
        self.carrinho.adicionar(self.produto, 'M', 'Bege', 2)

        with self.assertRaises(QuantidadeInvalidaError):
            self.carrinho.definir_quantidade('prod-1', 'M', 'Bege', 0)

        self.assertEqual(self.carrinho.itens[0].quantidade, 2)

    def test_adicionar_quantidade_zero_falha(self):
        with self.assertRaises(QuantidadeInvalidaError):
            self.carrinho.adicionar(self.produto, 'M', 'Bege', 0)
        self.assertTrue(self.carrinho.esta_vazio)

    def test_remover_e_limpar(self):
        self.carrinho.adicionar(self.produto, 'M', 'Bege')
        self.carrinho.adicionar(self.produto, 'P', 'Bege')

        self.carrinho.remover('prod-1', 'M', 'Bege')
        self.assertEqual([item.tamanho for item in self.carrinho.itens], ['P'])

        self.carrinho.limpar()
        self.assertTrue(self.carrinho.esta_vazio)
        self.assertEqual(self.carrinho.total, Decimal('0.00'))


# ====================================================================
# FRETE
# ====================================================================

class TestCalcularFrete(unittest.TestCase):

    def setUp(self):
        self.produto = criar_produto(peso_kg=Decimal('0.4'))

    def itens(self, quantidade):
        return [ItemCarrinho(self.produto, quantidade, 'M', 'Bege')]

    def test_cep_invalido_resulta_em_indisponivel(self):
        opcao = calcular_frete('1401-012', self.itens(1), Decimal('50'))

        self.assertFalse(opcao.disponivel)
        self.assertIsNone(opcao.preco)
        self.assertIsNone(opcao.dias)

    def test_frete_gratis_a_partir_do_limite(self):
        opcao = calcular_frete('14010-120', self.itens(2), Decimal('199.00'))

        self.assertTrue(opcao.gratis)
        self.assertEqual(opcao.preco, Decimal('0.00'))
        self.assertEqual(opcao.dias, 5)

    def test_faixas_regionais_por_prefixo(self):
        """
        Cenário: Prefixos 01-19 (próxima), 20-28/30-39/80-99 (intermediária), demais (distante).
        """
        self.assertEqual(faixa_por_cep('14010120').nome, 'proxima')
        self.assertEqual(faixa_por_cep('22041001').nome, 'intermediaria')
        self.assertEqual(faixa_por_cep('30130000').nome, 'intermediaria')
        self.assertEqual(faixa_por_cep('80010000').nome, 'intermediaria')
        self.assertEqual(faixa_por_cep('29000000').nome, 'distante')
        self.assertEqual(faixa_por_cep('40010000').nome, 'distante')
        self.assertEqual(faixa_por_cep('00010000').nome, 'distante')

    def test_preco_e_prazo_da_faixa(self):
        proxima = calcular_frete('14010120', self.itens(1), Decimal('100'))
        intermediaria = calcular_frete('22041001', self.itens(1), Decimal('100'))
        distante = calcular_frete('69005000', self.itens(1), Decimal('100'))

        self.assertEqual((proxima.preco, proxima.dias), (Decimal('14.00'), 2))
        self.assertEqual((intermediaria.preco, intermediaria.dias), (Decimal('19.00'), 4))
        self.assertEqual((distante.preco, distante.dias), (Decimal('24.00'), 7))

    def test_sobretaxa_por_volume_a_cada_tres_pecas(self):
        self.assertEqual(SobretaxaPorVolume()(self.itens(2)), Decimal('0.00'))
        self.assertEqual(SobretaxaPorVolume()(self.itens(3)), Decimal('2.00'))
        self.assertEqual(SobretaxaPorVolume()(self.itens(7)), Decimal('4.00'))

        opcao = calcular_frete('14010120', self.itens(3), Decimal('150'))
        self.assertEqual(opcao.preco, Decimal('16.00'))

    def test_sobretaxa_por_peso_acima_da_franquia(self):
        # 5 x 0.4kg = 2kg -> 1kg excedente
        opcao = calcular_frete('14010120', self.itens(5), Decimal('150'), sobretaxa=SobretaxaPorPeso())

        self.assertEqual(opcao.preco, Decimal('19.00'))

    def test_politica_de_sobretaxa_desconhecida(self):
        self.assertIsInstance(obter_sobretaxa('peso'), SobretaxaPorPeso)
        with self.assertRaises(ValueError):
            obter_sobretaxa('distancia')


# ====================================================================
# NOTIFICADOR
# ====================================================================

class TestNotificador(unittest.TestCase):

    def test_assinar_entrega_snapshot_e_cancelar_interrompe(self):
        # ARRANGE
        dados = ['a']
        notificador = Notificador(lambda: list(dados))
        callback = Mock()

        # ACT
        cancelar = notificador.assinar(callback)
        dados.append('b')
        notificador.publicar()
        cancelar()
        notificador.publicar()

        # ASSERT
        self.assertEqual(callback.call_args_list[0].args[0], ['a'])
        self.assertEqual(callback.call_args_list[1].args[0], ['a', 'b'])
        self.assertEqual(callback.call_count, 2)
        self.assertEqual(notificador.total_assinantes, 0)

    def test_assinante_com_defeito_nao_bloqueia_os_demais(self):
        notificador = Notificador(lambda: [1])
        defeituoso = Mock(side_effect=[None, RuntimeError('falhou')])
        saudavel = Mock()
        notificador.assinar(defeituoso)
        notificador.assinar(saudavel)

        with self.assertLogs('completa.core.eventos', level='ERROR'):
            notificador.publicar()

        self.assertEqual(saudavel.call_count, 2)


# ====================================================================
# CATÁLOGO
# ====================================================================

class TestListarProdutosUseCase(unittest.TestCase):

    def setUp(self):
        self.produto_repo_mock = Mock()
        self.use_case = ListarProdutosUseCase(self.produto_repo_mock)
        self.vestido = criar_produto(
            id='v', nome='Vestido Midi', preco=Decimal('200'), cores=['Bege'], tamanhos=['M'],
            vendidos=5, lancamento=True, data_criacao=INSTANTE,
        )
        self.blusa = criar_produto(
            id='b', nome='Blusa Seda', categoria='Blusas', preco=Decimal('150'),
            preco_promocional=Decimal('90'), cores=['Off-White'], tamanhos=['P'],
            vendidos=20, mais_vendido=True, data_criacao=INSTANTE - timedelta(days=1),
        )
        self.inativo = criar_produto(id='x', nome='Saia', ativo=False, lancamento=True)
        self.produto_repo_mock.listar_todos.return_value = [self.vestido, self.blusa, self.inativo]

    def test_lista_somente_ativos(self):
        self.assertEqual([p.id for p in self.use_case.listar()], ['v', 'b'])

    def test_filtros_combinados(self):
        self.assertEqual([p.id for p in self.use_case.listar(busca='blusas')], ['b'])
        self.assertEqual([p.id for p in self.use_case.listar(cores=['Bege'])], ['v'])
        self.assertEqual([p.id for p in self.use_case.listar(tamanhos=['P', 'G'])], ['b'])
        self.assertEqual([p.id for p in self.use_case.listar(preco_max=Decimal('160'))], ['b'])
        self.assertEqual(self.use_case.listar(categorias=['Vestidos'], cores=['Off-White']), [])

    def test_ordenacoes(self):
        self.assertEqual([p.id for p in self.use_case.listar(ordenacao='price_asc')], ['b', 'v'])
        self.assertEqual([p.id for p in self.use_case.listar(ordenacao='best_selling')], ['b', 'v'])
        self.assertEqual([p.id for p in self.use_case.listar(ordenacao='newest')], ['v', 'b'])
        self.assertEqual([p.id for p in self.use_case.listar(ordenacao='discount')], ['b', 'v'])

    def test_ordenacao_desconhecida(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.listar(ordenacao='aleatoria')

    def test_vitrines_ignoram_inativos(self):
        vitrines = self.use_case.vitrines()

        self.assertEqual([p.id for p in vitrines['lancamentos']], ['v'])
        self.assertEqual([p.id for p in vitrines['mais_vendidos']], ['b'])

    def test_detalhar_produto_inativo_falha(self):
        self.produto_repo_mock.buscar_por_id.return_value = self.inativo

        with self.assertRaises(ProdutoNaoEncontradoError):
            self.use_case.detalhar('x')


class TestGerenciarProdutosAdminUseCase(unittest.TestCase):

    def setUp(self):
        self.produto_repo_mock = Mock()
        self.produto_repo_mock.salvar.side_effect = lambda produto: produto
        self.use_case = GerenciarProdutosAdminUseCase(self.produto_repo_mock)
        self.produto = criar_produto()
        self.produto_repo_mock.buscar_por_id.return_value = self.produto

    def test_atualizar_revalida_preco_promocional(self):
        with self.assertRaises(PrecoPromocionalInvalidoError):
            self.use_case.atualizar('prod-1', {'preco_promocional': Decimal('150')})
        self.produto_repo_mock.salvar.assert_not_called()

    def test_atualizar_campos(self):
        atualizado = self.use_case.atualizar('prod-1', {'nome': 'Vestido Longo', 'estoque': 3})

        self.assertEqual(atualizado.nome, 'Vestido Longo')
        self.assertEqual(atualizado.estoque, 3)
        self.assertIsNotNone(atualizado.data_atualizacao)

    def test_atualizar_campo_nao_editavel(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.atualizar('prod-1', {'vendidos': 99})

    def test_alternar_flag(self):
        resultado = self.use_case.alternar_flag('prod-1', 'lancamento')

        self.assertTrue(resultado.lancamento)
        with self.assertRaises(DadosInvalidosError):
            self.use_case.alternar_flag('prod-1', 'preco')

    def test_deletar_inexistente(self):
        self.produto_repo_mock.buscar_por_id.return_value = None

        with self.assertRaises(ProdutoNaoEncontradoError):
            self.use_case.deletar('nao-existe')
        self.produto_repo_mock.deletar.assert_not_called()

    def test_resumo_painel(self):
        self.produto_repo_mock.listar_todos.return_value = [
            criar_produto(id='1', estoque=2), criar_produto(id='2', estoque=10, ativo=False),
        ]

        self.assertEqual(self.use_case.resumo_painel(), {
            'total_produtos': 2, 'produtos_ativos': 1, 'estoque_total': 12, 'estoque_baixo': 1,
        })


class TestEnviarImagemProdutoUseCase(unittest.TestCase):

    def test_envia_para_o_armazenamento(self):
        armazenamento_mock = Mock()
        armazenamento_mock.enviar.return_value = 'https://cdn.example.com/foto.jpg'

        url = EnviarImagemProdutoUseCase(armazenamento_mock).executar('aGVsbG8=', 'foto.jpg')

        self.assertEqual(url, 'https://cdn.example.com/foto.jpg')
        armazenamento_mock.enviar.assert_called_once_with('aGVsbG8=', 'foto.jpg')

    def test_sem_conteudo_falha(self):
        with self.assertRaises(DadosInvalidosError):
            EnviarImagemProdutoUseCase(Mock()).executar('')


# ====================================================================
# CARRINHO E LISTA DE DESEJOS
# ====================================================================

class TestGerenciarCarrinhoUseCase(unittest.TestCase):

    def setUp(self):
        self.armazenamento_mock = Mock()
        self.armazenamento_mock.carregar.return_value = None
        self.produto = criar_produto()

    def test_cada_mutacao_grava_a_lista_completa(self):
        use_case = GerenciarCarrinhoUseCase(self.armazenamento_mock)

        use_case.adicionar(self.produto, 'M', 'Bege', 2)

        chave, conteudo = self.armazenamento_mock.salvar.call_args.args
        self.assertEqual(chave, 'completa_cart')
        self.assertEqual(json.loads(conteudo)[0]['quantidade'], 2)

    def test_carrinho_e_restaurado_do_armazenamento(self):
        salvo = json.dumps([ItemCarrinho(self.produto, 3, 'P', 'Bege').para_dict()])
        self.armazenamento_mock.carregar.return_value = salvo

        use_case = GerenciarCarrinhoUseCase(self.armazenamento_mock)

        self.assertEqual(use_case.carrinho.contagem, 3)
        self.assertEqual(use_case.carrinho.itens[0].produto, self.produto)

    def test_conteudo_ilegivel_inicia_vazio(self):
        self.armazenamento_mock.carregar.return_value = '{quebrado'

        with self.assertLogs('completa.core.use_cases', level='ERROR'):
            use_case = GerenciarCarrinhoUseCase(self.armazenamento_mock)

        self.assertTrue(use_case.carrinho.esta_vazio)

    def test_falha_ao_gravar_nao_interrompe(self):
        self.armazenamento_mock.salvar.side_effect = OSError('cheio')
        use_case = GerenciarCarrinhoUseCase(self.armazenamento_mock)

        with self.assertLogs('completa.core.use_cases', level='ERROR'):
            linha_nova = use_case.adicionar(self.produto, 'M', 'Bege')

        self.assertTrue(linha_nova)
        self.assertEqual(use_case.carrinho.contagem, 1)

    def test_tamanho_ou_cor_indisponivel(self):
        use_case = GerenciarCarrinhoUseCase(self.armazenamento_mock)

        with self.assertRaises(DadosInvalidosError):
            use_case.adicionar(self.produto, 'GG', 'Bege')
        with self.assertRaises(DadosInvalidosError):
            use_case.adicionar(self.produto, 'M', 'Preto')
        self.armazenamento_mock.salvar.assert_not_called()


class TestGerenciarListaDesejosUseCase(unittest.TestCase):

    def test_adicionar_sem_duplicar(self):
        armazenamento_mock = Mock()
        armazenamento_mock.carregar.return_value = json.dumps(['a', 'a', 'b'])
        use_case = GerenciarListaDesejosUseCase(armazenamento_mock)

        self.assertEqual(use_case.contagem, 2)
        self.assertFalse(use_case.adicionar('a'))
        self.assertTrue(use_case.adicionar('c'))

        use_case.remover('b')
        self.assertFalse(use_case.contem('b'))
        armazenamento_mock.salvar.assert_called_with('completa_wishlist', json.dumps(['a', 'c']))


# ====================================================================
# FRETE E CEP (CASOS DE USO)
# ====================================================================

class TestCotarFreteUseCase(unittest.TestCase):

    def test_usa_total_do_carrinho(self):
        calculadora = Mock(return_value=OpcaoFrete('Entrega Padrão', Decimal('14.00'), 2))
        carrinho = Carrinho()
        carrinho.adicionar(criar_produto(), 'M', 'Bege', 2)

        CotarFreteUseCase(calculadora).executar('14010120', carrinho)

        calculadora.assert_called_once_with('14010120', carrinho.itens, Decimal('200.00'))


class TestConsultarCepUseCase(unittest.TestCase):

    def test_cep_nao_encontrado(self):
        consulta_mock = Mock()
        consulta_mock.buscar_endereco.return_value = None

        with self.assertRaises(ItemNaoEncontradoError):
            ConsultarCepUseCase(consulta_mock).executar('00000000')


# ====================================================================
# CHECKOUT
# ====================================================================

class TestValidarDadosCheckout(unittest.TestCase):

    def setUp(self):
        self.itens = [ItemCarrinho(criar_produto(), 1, 'M', 'Bege')]

    def test_ordem_de_validacao(self):
        """
        Cenário: Carrinho vazio tem prioridade sobre cliente incompleto, que tem prioridade sobre endereço.
        """
        cliente_incompleto = criar_cliente(cpf='')

        with self.assertRaises(CarrinhoVazioError):
            validar_dados_checkout([], cliente_incompleto, 'ENTREGA', None)
        with self.assertRaises(DadosClienteIncompletosError):
            validar_dados_checkout(self.itens, cliente_incompleto, 'ENTREGA', None)
        with self.assertRaises(EnderecoIncompletoError):
            validar_dados_checkout(self.itens, criar_cliente(), 'ENTREGA', criar_endereco(numero=' '))

    def test_cada_campo_do_cliente_e_obrigatorio(self):
        for campo in CAMPOS_CLIENTE:
            with self.subTest(campo=campo):
                with self.assertRaises(DadosClienteIncompletosError) as ctx:
                    validar_dados_checkout(self.itens, criar_cliente(**{campo: '  '}), 'RETIRADA', None)
                self.assertIn(campo, ctx.exception.message)

    def test_cada_campo_do_endereco_e_obrigatorio_na_entrega(self):
        for campo in CAMPOS_ENDERECO:
            with self.subTest(campo=campo):
                with self.assertRaises(EnderecoIncompletoError):
                    validar_dados_checkout(self.itens, criar_cliente(), 'ENTREGA', criar_endereco(**{campo: ''}))

    def test_cpf_so_com_pontuacao_conta_como_ausente(self):
        """
        Cenário: Um CPF formado apenas por separadores não tem dígitos para enviar ao provedor.
        """
        with self.assertRaises(DadosClienteIncompletosError) as ctx:
            validar_dados_checkout(self.itens, criar_cliente(cpf='---'), 'RETIRADA', None)

        self.assertIn('cpf', ctx.exception.message)

    def test_retirada_dispensa_endereco(self):
        metodo = validar_dados_checkout(self.itens, criar_cliente(), 'RETIRADA', None)

        self.assertEqual(metodo, MetodoEntrega.RETIRADA)

    def test_metodo_de_entrega_aceita_minusculas(self):
        self.assertEqual(
            validar_dados_checkout(self.itens, criar_cliente(), 'retirada', None), MetodoEntrega.RETIRADA
        )
        self.assertEqual(
            validar_dados_checkout(self.itens, criar_cliente(), 'entrega', criar_endereco()), MetodoEntrega.ENTREGA
        )
        self.assertEqual(
            validar_dados_checkout(self.itens, criar_cliente(), MetodoEntrega.RETIRADA, None), MetodoEntrega.RETIRADA
        )

    def test_metodo_de_entrega_desconhecido(self):
        with self.assertRaises(DadosInvalidosError):
            validar_dados_checkout(self.itens, criar_cliente(), 'DRONE', None)


class TestIniciarCheckoutUseCase(unittest.TestCase):

    def setUp(self):
        self.pedido_repo_mock = Mock()
        self.pedido_repo_mock.salvar.side_effect = lambda pedido: pedido
        self.gateway_mock = Mock()
        self.calculadora_mock = Mock(return_value=OpcaoFrete('Entrega Padrão', Decimal('14.00'), 2))

        self.use_case = IniciarCheckoutUseCase(
            pedido_repo=self.pedido_repo_mock,
            pagamento_gateway=self.gateway_mock,
            calcular_frete=self.calculadora_mock,
            relogio=lambda: INSTANTE,
        )
        self.itens = [ItemCarrinho(criar_produto(), 2, 'M', 'Bege')]

    def test_pix_faz_duas_chamadas_com_validade_de_30_minutos(self):
        """
        Cenário: Subtotal 200,00 com frete 14,00 via PIX.
        O pedido é criado no provedor e depois a cobrança PIX com o total em centavos.
        """
        # ARRANGE
        self.gateway_mock.criar_pedido.return_value = PedidoProvedor(id='ORDE_1')
        self.gateway_mock.criar_cobranca_pix.return_value = CobrancaPix(
            id='CHAR_1', codigo='00020126...', qr_code_url='https://qr.example.com/1.png', expira_em=None,
        )

        # ACT
        resultado = self.use_case.executar(
            self.itens, criar_cliente(), 'ENTREGA', 'pix', endereco=criar_endereco(),
        )

        # ASSERT
        solicitacao = self.gateway_mock.criar_pedido.call_args.args[0]
        self.assertEqual(solicitacao.valor_total, 21400)
        self.assertEqual(solicitacao.valor_frete, 1400)
        self.gateway_mock.criar_cobranca_pix.assert_called_once_with(
            'ORDE_1', 21400, INSTANTE + timedelta(seconds=1800)
        )
        self.assertEqual(resultado.tipo, 'PIX')
        self.assertEqual(resultado.codigo, '00020126...')
        self.assertEqual(resultado.expira_em, INSTANTE + timedelta(minutes=30))
        self.assertEqual(resultado.pedido.total, Decimal('214.00'))
        self.assertEqual(resultado.pedido.status, StatusPedido.AGUARDANDO_PAGAMENTO)
        self.assertEqual(resultado.pedido.pedido_provedor_id, 'ORDE_1')
        self.pedido_repo_mock.salvar.assert_called_once()

    def test_cartao_usa_link_pay(self):
        self.gateway_mock.criar_pedido.return_value = PedidoProvedor(id='ORDE_2', links=(
            LinkProvedor('SELF', 'https://api/orders/ORDE_2'),
            LinkProvedor('PAY', 'https://pagbank/pay/ORDE_2'),
        ))

        resultado = self.use_case.executar(
            self.itens, criar_cliente(), 'ENTREGA', MetodoPagamento.CARTAO, endereco=criar_endereco(),
        )

        self.assertEqual(resultado.tipo, 'REDIRECIONAMENTO')
        self.assertEqual(resultado.url_redirecionamento, 'https://pagbank/pay/ORDE_2')
        self.assertEqual(resultado.pedido.link_pagamento, 'https://pagbank/pay/ORDE_2')
        self.gateway_mock.criar_cobranca_pix.assert_not_called()

    def test_boleto_sem_pay_usa_checkout(self):
        self.gateway_mock.criar_pedido.return_value = PedidoProvedor(id='ORDE_3', links=(
            LinkProvedor('SELF', 'https://api/orders/ORDE_3'),
            LinkProvedor('CHECKOUT', 'https://pagbank/checkout/ORDE_3'),
        ))

        resultado = self.use_case.executar(
            self.itens, criar_cliente(), 'RETIRADA', 'BOLETO',
        )

        self.assertEqual(resultado.url_redirecionamento, 'https://pagbank/checkout/ORDE_3')
        self.assertEqual(resultado.pedido.total, Decimal('200.00'))
        self.calculadora_mock.assert_not_called()

    def test_retirada_envia_endereco_da_loja(self):
        self.gateway_mock.criar_pedido.return_value = PedidoProvedor(
            id='ORDE_4', links=(LinkProvedor('PAY', 'https://pagbank/pay/ORDE_4'),)
        )

        self.use_case.executar(self.itens, criar_cliente(), 'RETIRADA', 'CARTAO')

        solicitacao = self.gateway_mock.criar_pedido.call_args.args[0]
        self.assertEqual(solicitacao.endereco_entrega.cep, '14010120')
        self.assertEqual(solicitacao.valor_frete, 0)
        self.assertEqual(solicitacao.cliente.cpf, '12345678909')
        self.assertEqual(solicitacao.cliente.telefones[0].area, '16')

    def test_sem_links_falha_e_nao_registra_pedido(self):
        self.gateway_mock.criar_pedido.return_value = PedidoProvedor(id='ORDE_5')

        with self.assertRaises(SemLinkPagamentoError):
            self.use_case.executar(self.itens, criar_cliente(), 'RETIRADA', 'CARTAO')

        self.pedido_repo_mock.salvar.assert_not_called()

    def test_validacao_acontece_antes_de_qualquer_chamada(self):
        with self.assertRaises(EnderecoIncompletoError):
            self.use_case.executar(self.itens, criar_cliente(), 'ENTREGA', 'PIX', endereco=None)
        with self.assertRaises(MetodoPagamentoInvalidoError):
            self.use_case.executar(self.itens, criar_cliente(), 'RETIRADA', 'WHATSAPP')

        self.gateway_mock.criar_pedido.assert_not_called()

    def test_frete_indisponivel(self):
        self.calculadora_mock.return_value = OpcaoFrete.indisponivel()

        with self.assertRaises(FreteIndisponivelError):
            self.use_case.executar(
                self.itens, criar_cliente(), 'ENTREGA', 'PIX', endereco=criar_endereco(cep='123'),
            )
        self.gateway_mock.criar_pedido.assert_not_called()

    def test_falha_do_provedor_propaga_sem_nova_tentativa(self):
        self.gateway_mock.criar_pedido.side_effect = SemLinkPagamentoError()

        with self.assertRaises(SemLinkPagamentoError):
            self.use_case.executar(self.itens, criar_cliente(), 'RETIRADA', 'PIX')

        self.assertEqual(self.gateway_mock.criar_pedido.call_count, 1)
        self.pedido_repo_mock.salvar.assert_not_called()


class TestRegistrarPedidoWhatsappUseCase(unittest.TestCase):

    def test_registra_pedido_e_monta_link(self):
        # ARRANGE
        pedido_repo_mock = Mock()
        pedido_repo_mock.salvar.side_effect = lambda pedido: pedido
        use_case = RegistrarPedidoWhatsappUseCase(
            pedido_repo=pedido_repo_mock,
            calcular_frete=Mock(),
            numero_loja='+55 (16) 99999-9999',
            relogio=lambda: INSTANTE,
        )
        itens = [ItemCarrinho(criar_produto(), 1, 'M', 'Bege')]

        # ACT
        pedido, url = use_case.executar(itens, criar_cliente(), 'RETIRADA')

        # ASSERT
        self.assertEqual(pedido.metodo_pagamento, MetodoPagamento.WHATSAPP)
        self.assertEqual(pedido.status, StatusPedido.AGUARDANDO_PAGAMENTO)
        self.assertTrue(url.startswith('https://wa.me/5516999999999?text='))
        mensagem = unquote(url.split('text=', 1)[1])
        self.assertIn(pedido.id, mensagem)
        self.assertIn('1x Vestido Midi Linho (M/Bege) R$ 100,00', mensagem)
        self.assertIn('Total: R$ 100,00', mensagem)


class TestFormatarMoeda(unittest.TestCase):

    def test_padrao_brasileiro(self):
        self.assertEqual(formatar_moeda(Decimal('1234.5')), 'R$ 1.234,50')
        self.assertEqual(formatar_moeda(Decimal('0')), 'R$ 0,00')
        self.assertEqual(para_centavos(Decimal('19.99')), 1999)


# ====================================================================
# ADMINISTRAÇÃO DE PEDIDOS
# ====================================================================

class TestGerenciarPedidosAdminUseCase(unittest.TestCase):

    def setUp(self):
        self.pedido_repo_mock = Mock()
        self.pedido_repo_mock.salvar.side_effect = lambda pedido: pedido
        self.relogio = Mock(return_value=INSTANTE)
        self.use_case = GerenciarPedidosAdminUseCase(self.pedido_repo_mock, relogio=self.relogio)
        self.pedido = criar_pedido(id='ped-1')
        self.pedido_repo_mock.buscar_por_id.return_value = self.pedido

    def test_marcar_pago_registra_data_a_cada_marcacao(self):
        """
        Cenário: Marcar 'pago' duas vezes atualiza a data de pagamento nas duas.
        """
        primeiro = self.use_case.atualizar_status_manual('ped-1', 'pago')
        self.assertEqual(primeiro.data_pagamento, INSTANTE)

        self.relogio.return_value = INSTANTE + timedelta(hours=1)
        segundo = self.use_case.atualizar_status_manual('ped-1', 'PAGO')

        self.assertEqual(segundo.status, StatusPedido.PAGO)
        self.assertEqual(segundo.data_pagamento, INSTANTE + timedelta(hours=1))

    def test_outros_status_limpam_data_de_pagamento(self):
        self.pedido.status = StatusPedido.PAGO
        self.pedido.data_pagamento = INSTANTE

        resultado = self.use_case.atualizar_status_manual('ped-1', 'enviado')

        self.assertEqual(resultado.status, StatusPedido.ENVIADO)
        self.assertIsNone(resultado.data_pagamento)

    def test_qualquer_transicao_e_permitida(self):
        self.pedido.status = StatusPedido.CANCELADO

        resultado = self.use_case.atualizar_status_manual('ped-1', 'aguardando_pagamento')

        self.assertEqual(resultado.status, StatusPedido.AGUARDANDO_PAGAMENTO)

    def test_status_desconhecido(self):
        with self.assertRaises(StatusInvalidoError):
            self.use_case.atualizar_status_manual('ped-1', 'devolvido')
        self.pedido_repo_mock.salvar.assert_not_called()

    def test_pedido_inexistente(self):
        self.pedido_repo_mock.buscar_por_id.return_value = None

        with self.assertRaises(PedidoNaoEncontradoError):
            self.use_case.atualizar_status_manual('nao-existe', 'pago')

    def test_listar_com_busca_por_nome_ou_id(self):
        antigo = criar_pedido(id='abc-1', data_criacao=INSTANTE - timedelta(days=2))
        recente = criar_pedido(id='xyz-2', cliente=criar_cliente(nome='João'), data_criacao=INSTANTE)
        self.pedido_repo_mock.listar_todos.return_value = [antigo, recente]

        self.assertEqual([p.id for p in self.use_case.listar_todos()], ['xyz-2', 'abc-1'])
        self.assertEqual([p.id for p in self.use_case.listar_todos(busca='joão')], ['xyz-2'])
        self.assertEqual([p.id for p in self.use_case.listar_todos(busca='ABC')], ['abc-1'])

        self.use_case.listar_todos(status='PAGO')
        self.pedido_repo_mock.listar_todos.assert_called_with('pago')

    def test_definir_link_pagamento(self):
        resultado = self.use_case.definir_link_pagamento('ped-1', '  https://pag.ae/abc ')
        self.assertEqual(resultado.link_pagamento, 'https://pag.ae/abc')

        resultado = self.use_case.definir_link_pagamento('ped-1', '')
        self.assertIsNone(resultado.link_pagamento)


# ====================================================================
# USUÁRIOS
# ====================================================================

class TestSincronizarUsuarioUseCase(unittest.TestCase):

    def setUp(self):
        self.usuario_repo_mock = Mock()
        self.usuario_repo_mock.salvar.side_effect = lambda usuario: usuario
        self.use_case = SincronizarUsuarioUseCase(self.usuario_repo_mock)

    def test_primeiro_acesso_cria_perfil_user(self):
        self.usuario_repo_mock.buscar_por_id.return_value = None

        usuario = self.use_case.executar('u-1', 'Ana', 'ana@example.com')

        self.assertEqual(usuario.papel, 'user')
        self.assertEqual(usuario.id, 'u-1')
        self.usuario_repo_mock.salvar.assert_called_once()

    def test_perfil_existente_mantem_papel(self):
        existente = Usuario(id='u-1', nome='Ana', email='ana@example.com', papel='admin')
        self.usuario_repo_mock.buscar_por_id.return_value = existente

        usuario = self.use_case.executar('u-1', 'Outro Nome', 'ana@example.com')

        self.assertTrue(usuario.eh_admin)
        self.usuario_repo_mock.salvar.assert_not_called()


if __name__ == '__main__':
    unittest.main()
