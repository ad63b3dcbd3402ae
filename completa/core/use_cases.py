# completa/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da aplicação.
Esta camada depende apenas das Entidades e Portas (Interfaces) do Core,
garantindo o isolamento da lógica de negócio.
"""
import json
import logging
from dataclasses import replace
from datetime import timedelta
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

# Entidades e Exceções
from completa.core.entities import (
    Carrinho, Cliente, Endereco, ItemCarrinho, ItemPedido, ListaDesejos, MetodoEntrega,
    MetodoPagamento, OpcaoFrete, Pedido, Produto, StatusPedido, Usuario,
    agora, para_centavos, quantizar,
)
from completa.core.exceptions import (
    CarrinhoVazioError,
    DadosClienteIncompletosError,
    DadosInvalidosError,
    EnderecoIncompletoError,
    FreteIndisponivelError,
    ItemNaoEncontradoError,
    MetodoPagamentoInvalidoError,
    PedidoNaoEncontradoError,
    ProdutoNaoEncontradoError,
    SemLinkPagamentoError,
    StatusInvalidoError,
)
from completa.core.frete import limpar_digitos, opcao_retirada
from completa.core.pagamento import (
    ClientePagamento, EnderecoPagamento, ItemPagamento, ResultadoCheckout,
    ResultadoCheckoutHospedado, ResultadoCheckoutPix, SolicitacaoPedidoPagamento, TelefonePagamento,
)

# Portas (Interfaces) - Importadas do completa/core/ports.py
from completa.core.ports import (
    IArmazenamentoImagens,
    IArmazenamentoLocal,
    IConsultaCep,
    IGatewayPagamento,
    IPedidoRepository,
    IProdutoRepository,
    IUsuarioRepository,
)

logger = logging.getLogger(__name__)

# Endereço enviado ao provedor quando o cliente retira o pedido na loja
ENDERECO_LOJA = Endereco(
    cep='14010120',
    rua='R. Barão do Amazonas',
    numero='730',
    bairro='Centro',
    cidade='Ribeirão Preto',
    estado='SP',
    complemento='Loja Completa',
)


def formatar_moeda(valor: Decimal) -> str:
    """Formata no padrão brasileiro: R$ 1.234,56."""
    texto = f"{quantizar(valor):,.2f}"
    return "R$ " + texto.replace(',', '#').replace('.', ',').replace('#', '.')


# ====================================================================
# 1. CASOS DE USO DO CATÁLOGO
# ====================================================================

class ListarProdutosUseCase:
    """Caso de Uso responsável pela vitrine: filtros, ordenação e destaques."""

    ORDENACOES = ('relevance', 'newest', 'best_selling', 'price_asc', 'price_desc', 'discount')
    TAMANHO_VITRINE = 4

    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def listar(
        self,
        busca: Optional[str] = None,
        categorias: Sequence[str] = (),
        cores: Sequence[str] = (),
        tamanhos: Sequence[str] = (),
        marcas: Sequence[str] = (),
        preco_min: Optional[Decimal] = None,
        preco_max: Optional[Decimal] = None,
        ordenacao: str = 'relevance',
    ) -> List[Produto]:
        """Retorna apenas produtos ativos que atendem a todos os filtros informados."""
        if ordenacao not in self.ORDENACOES:
            raise DadosInvalidosError(f"Ordenação '{ordenacao}' não suportada.")

        produtos = [p for p in self.produto_repo.listar_todos() if p.ativo]

        if busca:
            termo = busca.lower()
            produtos = [p for p in produtos if termo in p.nome.lower() or termo in p.categoria.lower()]
        if categorias:
            produtos = [p for p in produtos if p.categoria in categorias]
        if cores:
            produtos = [p for p in produtos if any(c in cores for c in p.cores)]
        if tamanhos:
            produtos = [p for p in produtos if any(t in tamanhos for t in p.tamanhos)]
        if marcas:
            produtos = [p for p in produtos if p.marca and p.marca in marcas]
        # O filtro de faixa de preço considera o preço base
        if preco_min is not None:
            produtos = [p for p in produtos if p.preco >= preco_min]
        if preco_max is not None:
            produtos = [p for p in produtos if p.preco <= preco_max]

        return self._ordenar(produtos, ordenacao)

    def _ordenar(self, produtos: List[Produto], ordenacao: str) -> List[Produto]:
        if ordenacao == 'newest':
            return sorted(produtos, key=lambda p: p.data_criacao, reverse=True)
        if ordenacao == 'best_selling':
            return sorted(produtos, key=lambda p: p.vendidos, reverse=True)
        if ordenacao == 'price_asc':
            return sorted(produtos, key=lambda p: p.preco_final)
        if ordenacao == 'price_desc':
            return sorted(produtos, key=lambda p: p.preco_final, reverse=True)
        if ordenacao == 'discount':
            return sorted(produtos, key=lambda p: p.desconto, reverse=True)
        return produtos

    def vitrines(self) -> Dict[str, List[Produto]]:
        ativos = [p for p in self.produto_repo.listar_todos() if p.ativo]
        return {
            'lancamentos': [p for p in ativos if p.lancamento][:self.TAMANHO_VITRINE],
            'mais_vendidos': [p for p in ativos if p.mais_vendido][:self.TAMANHO_VITRINE],
        }

    def detalhar(self, produto_id: str) -> Produto:
        """Busca um produto visível na loja pelo seu ID."""
        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto or not produto.ativo:
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não encontrado.")
        return produto


class GerenciarProdutosAdminUseCase:
    """Caso de Uso do painel administrativo de produtos."""

    FLAGS = ('ativo', 'lancamento', 'mais_vendido')
    CAMPOS_EDITAVEIS = (
        'nome', 'descricao', 'preco', 'preco_promocional', 'categoria', 'marca', 'imagem_url',
        'tamanhos', 'cores', 'estoque', 'peso_kg', 'comprimento_cm', 'largura_cm', 'altura_cm',
        'ativo', 'lancamento', 'mais_vendido',
    )
    LIMITE_ESTOQUE_BAIXO = 5

    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def _buscar(self, produto_id: str) -> Produto:
        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não encontrado.")
        return produto

    def listar(self) -> List[Produto]:
        """Todos os produtos, inclusive os inativos."""
        return self.produto_repo.listar_todos()

    def criar(self, produto: Produto) -> Produto:
        produto.vendidos = 0
        salvo = self.produto_repo.salvar(produto)
        logger.info("Produto %s criado: %s", salvo.id, salvo.nome)
        return salvo

    def atualizar(self, produto_id: str, dados: dict) -> Produto:
        """Atualiza os campos editáveis; as invariantes do produto são revalidadas."""
        desconhecidos = set(dados) - set(self.CAMPOS_EDITAVEIS)
        if desconhecidos:
            raise DadosInvalidosError(f"Campos não editáveis: {', '.join(sorted(desconhecidos))}.")

        produto = replace(self._buscar(produto_id), **dados, data_atualizacao=agora())
        return self.produto_repo.salvar(produto)

    def deletar(self, produto_id: str):
        self._buscar(produto_id)
        self.produto_repo.deletar(produto_id)
        logger.info("Produto %s removido", produto_id)

    def alternar_flag(self, produto_id: str, campo: str) -> Produto:
        if campo not in self.FLAGS:
            raise DadosInvalidosError(f"Campo '{campo}' não pode ser alternado.")
        produto = self._buscar(produto_id)
        setattr(produto, campo, not getattr(produto, campo))
        produto.data_atualizacao = agora()
        return self.produto_repo.salvar(produto)

    def resumo_painel(self) -> Dict[str, int]:
        produtos = self.produto_repo.listar_todos()
        return {
            'total_produtos': len(produtos),
            'produtos_ativos': sum(1 for p in produtos if p.ativo),
            'estoque_total': sum(p.estoque for p in produtos),
            'estoque_baixo': sum(1 for p in produtos if p.estoque < self.LIMITE_ESTOQUE_BAIXO),
        }


class EnviarImagemProdutoUseCase:
    def __init__(self, armazenamento_imagens: IArmazenamentoImagens):
        self.armazenamento_imagens = armazenamento_imagens

    def executar(self, conteudo_base64: str, nome_arquivo: Optional[str] = None) -> str:
        if not conteudo_base64:
            raise DadosInvalidosError("Nenhum arquivo de imagem foi enviado.")
        return self.armazenamento_imagens.enviar(conteudo_base64, nome_arquivo)


# ====================================================================
# 2. CASOS DE USO DO CARRINHO E DA LISTA DE DESEJOS
# ====================================================================

class GerenciarCarrinhoUseCase:
    """
    Estado do carrinho com persistência explícita no armazenamento local:
    carrega na criação e grava a lista completa de linhas após cada mutação.
    Falhas de leitura ou gravação são registradas no log e não interrompem a compra.
    """
    CHAVE_ARMAZENAMENTO = 'completa_cart'

    def __init__(self, armazenamento: IArmazenamentoLocal):
        self.armazenamento = armazenamento
        self.carrinho = self._carregar()

    def _carregar(self) -> Carrinho:
        try:
            bruto = self.armazenamento.carregar(self.CHAVE_ARMAZENAMENTO)
            if not bruto:
                return Carrinho()
            return Carrinho(itens=[ItemCarrinho.de_dict(dados) for dados in json.loads(bruto)])
        except Exception:
            logger.exception("Carrinho salvo ilegível; iniciando um carrinho vazio.")
            return Carrinho()

    def _salvar(self):
        try:
            conteudo = json.dumps([item.para_dict() for item in self.carrinho.itens])
            self.armazenamento.salvar(self.CHAVE_ARMAZENAMENTO, conteudo)
        except Exception:
            logger.exception("Não foi possível persistir o carrinho.")

    def adicionar(self, produto: Produto, tamanho: str, cor: str, quantidade: int = 1) -> bool:
        """Retorna True quando uma nova linha foi criada (a interface abre o carrinho)."""
        if produto.tamanhos and tamanho not in produto.tamanhos:
            raise DadosInvalidosError(f"Tamanho '{tamanho}' indisponível para {produto.nome}.")
        if produto.cores and cor not in produto.cores:
            raise DadosInvalidosError(f"Cor '{cor}' indisponível para {produto.nome}.")
        linha_nova = self.carrinho.adicionar(produto, tamanho, cor, quantidade)
        self._salvar()
        return linha_nova

    def remover(self, produto_id: str, tamanho: str, cor: str):
        self.carrinho.remover(produto_id, tamanho, cor)
        self._salvar()

    def definir_quantidade(self, produto_id: str, tamanho: str, cor: str, quantidade: int):
        self.carrinho.definir_quantidade(produto_id, tamanho, cor, quantidade)
        self._salvar()

    def limpar(self):
        self.carrinho.limpar()
        self._salvar()


class GerenciarListaDesejosUseCase:
    CHAVE_ARMAZENAMENTO = 'completa_wishlist'

    def __init__(self, armazenamento: IArmazenamentoLocal):
        self.armazenamento = armazenamento
        self.lista = self._carregar()

    def _carregar(self) -> ListaDesejos:
        try:
            bruto = self.armazenamento.carregar(self.CHAVE_ARMAZENAMENTO)
            if not bruto:
                return ListaDesejos()
            return ListaDesejos(produto_ids=list(dict.fromkeys(str(pid) for pid in json.loads(bruto))))
        except Exception:
            logger.exception("Lista de desejos salva ilegível; iniciando vazia.")
            return ListaDesejos()

    def _salvar(self):
        try:
            self.armazenamento.salvar(self.CHAVE_ARMAZENAMENTO, json.dumps(self.lista.produto_ids))
        except Exception:
            logger.exception("Não foi possível persistir a lista de desejos.")

    def adicionar(self, produto_id: str) -> bool:
        adicionado = self.lista.adicionar(produto_id)
        self._salvar()
        return adicionado

    def remover(self, produto_id: str):
        self.lista.remover(produto_id)
        self._salvar()

    def contem(self, produto_id: str) -> bool:
        return self.lista.contem(produto_id)

    @property
    def contagem(self) -> int:
        return len(self.lista.produto_ids)


# ====================================================================
# 3. CASOS DE USO DE FRETE
# ====================================================================

class CotarFreteUseCase:
    def __init__(self, calcular_frete: Callable[..., OpcaoFrete]):
        self.calcular_frete = calcular_frete

    def executar(self, cep: str, carrinho: Carrinho) -> OpcaoFrete:
        return self.calcular_frete(cep, carrinho.itens, carrinho.total)


class ConsultarCepUseCase:
    def __init__(self, consulta_cep: IConsultaCep):
        self.consulta_cep = consulta_cep

    def executar(self, cep: str) -> Endereco:
        endereco = self.consulta_cep.buscar_endereco(cep)
        if not endereco:
            raise ItemNaoEncontradoError(f"CEP {cep} não encontrado.")
        return endereco


# ====================================================================
# 4. CASOS DE USO DE PEDIDO E CHECKOUT
# ====================================================================

CAMPOS_CLIENTE = ('nome', 'email', 'telefone', 'cpf')
CAMPOS_ENDERECO = ('cep', 'rua', 'numero', 'bairro', 'cidade', 'estado')


def _preenchido(valor) -> bool:
    return bool(valor and str(valor).strip())


def _campo_cliente_preenchido(cliente: Cliente, campo: str) -> bool:
    valor = getattr(cliente, campo, None)
    if campo == 'cpf':
        # Só pontuação não conta como CPF informado
        return bool(limpar_digitos(valor or ''))
    return _preenchido(valor)


def validar_dados_checkout(
    itens: Sequence[ItemCarrinho],
    cliente: Cliente,
    metodo_entrega,
    endereco: Optional[Endereco],
) -> MetodoEntrega:
    """
    Validação em ordem fixa; a primeira violação encerra o checkout:
    carrinho -> dados do cliente -> endereço (somente para entrega).
    """
    if not itens:
        raise CarrinhoVazioError("Não é possível finalizar o checkout com o carrinho vazio.")

    faltando = [campo for campo in CAMPOS_CLIENTE if not _campo_cliente_preenchido(cliente, campo)]
    if faltando:
        raise DadosClienteIncompletosError(f"Preencha os dados do cliente: {', '.join(faltando)}.")

    try:
        metodo_entrega = MetodoEntrega(str(getattr(metodo_entrega, 'value', metodo_entrega)).strip().upper())
    except ValueError:
        raise DadosInvalidosError(f"Método de entrega '{metodo_entrega}' inválido.")

    if metodo_entrega == MetodoEntrega.ENTREGA:
        if endereco is None or not all(_preenchido(getattr(endereco, c)) for c in CAMPOS_ENDERECO):
            raise EnderecoIncompletoError()

    return metodo_entrega


def _montar_pedido(
    itens: Sequence[ItemCarrinho],
    cliente: Cliente,
    metodo_entrega: MetodoEntrega,
    endereco: Optional[Endereco],
    metodo_pagamento: MetodoPagamento,
    calcular_frete: Callable[..., OpcaoFrete],
    relogio: Callable,
    usuario_id: Optional[str],
) -> Pedido:
    subtotal_centavos = sum(para_centavos(item.preco_unitario) * item.quantidade for item in itens)
    subtotal = quantizar(Decimal(subtotal_centavos) / 100)

    if metodo_entrega == MetodoEntrega.RETIRADA:
        frete = opcao_retirada()
        endereco_pedido = None
    else:
        frete = calcular_frete(endereco.cep, list(itens), subtotal)
        if not frete.disponivel:
            raise FreteIndisponivelError()
        endereco_pedido = replace(endereco, cep=limpar_digitos(endereco.cep))

    return Pedido(
        cliente=replace(cliente, cpf=limpar_digitos(cliente.cpf)),
        itens=[
            ItemPedido(
                produto_id=item.produto.id,
                nome=item.produto.nome,
                quantidade=item.quantidade,
                preco=quantizar(item.preco_unitario),
                tamanho=item.tamanho,
                cor=item.cor,
            )
            for item in itens
        ],
        frete=frete,
        subtotal=subtotal,
        total=quantizar(subtotal + frete.preco),
        metodo_entrega=metodo_entrega,
        metodo_pagamento=metodo_pagamento,
        endereco=endereco_pedido,
        usuario_id=usuario_id,
        data_criacao=relogio(),
    )


def _montar_solicitacao(
    pedido: Pedido, referencia: str, urls_notificacao: Sequence[str]
) -> SolicitacaoPedidoPagamento:
    telefone = limpar_digitos(pedido.cliente.telefone)
    destino = pedido.endereco or ENDERECO_LOJA
    return SolicitacaoPedidoPagamento(
        referencia=referencia,
        cliente=ClientePagamento(
            nome=pedido.cliente.nome,
            email=pedido.cliente.email,
            cpf=pedido.cliente.cpf,
            telefones=(TelefonePagamento(pais='55', area=telefone[:2], numero=telefone[2:]),),
        ),
        itens=tuple(
            ItemPagamento(
                referencia=item.produto_id,
                nome=f"{item.nome} ({item.tamanho}/{item.cor})",
                quantidade=item.quantidade,
                valor_unitario=para_centavos(item.preco),
            )
            for item in pedido.itens
        ),
        valor_frete=para_centavos(pedido.frete.preco),
        endereco_entrega=EnderecoPagamento(
            rua=destino.rua,
            numero=destino.numero,
            complemento=destino.complemento or '',
            bairro=destino.bairro,
            cidade=destino.cidade,
            estado=destino.estado,
            cep=limpar_digitos(destino.cep),
        ),
        metodo=pedido.metodo_pagamento,
        urls_notificacao=tuple(urls_notificacao),
    )


class IniciarCheckoutUseCase:
    """
    Caso de Uso que coordena o checkout com o provedor de pagamento:
    validação, cotação de frete, pedido no provedor e registro do pedido local.

    Cartão/boleto resultam em um link de checkout hospedado; PIX resulta em um
    código com validade de 30 minutos. Nada é tentado novamente em caso de falha.
    """
    VALIDADE_PIX = timedelta(minutes=30)
    METODOS_ACEITOS = (MetodoPagamento.CARTAO, MetodoPagamento.BOLETO, MetodoPagamento.PIX)

    def __init__(self,
                 pedido_repo: IPedidoRepository,
                 pagamento_gateway: IGatewayPagamento,
                 calcular_frete: Callable[..., OpcaoFrete],
                 relogio: Callable = agora):
        self.pedido_repo = pedido_repo
        self.pagamento_gateway = pagamento_gateway
        self.calcular_frete = calcular_frete
        self.relogio = relogio

    def _converter_metodo(self, metodo_pagamento) -> MetodoPagamento:
        try:
            metodo = MetodoPagamento(str(getattr(metodo_pagamento, 'value', metodo_pagamento)).upper())
        except ValueError:
            raise MetodoPagamentoInvalidoError(f"Método de pagamento '{metodo_pagamento}' não suportado.")
        if metodo not in self.METODOS_ACEITOS:
            raise MetodoPagamentoInvalidoError(f"Método de pagamento '{metodo_pagamento}' não suportado.")
        return metodo

    def executar(
        self,
        itens: Sequence[ItemCarrinho],
        cliente: Cliente,
        metodo_entrega,
        metodo_pagamento,
        endereco: Optional[Endereco] = None,
        referencia: Optional[str] = None,
        urls_notificacao: Sequence[str] = (),
        usuario_id: Optional[str] = None,
    ) -> ResultadoCheckout:
        """Processa o checkout. Erros de validação são levantados antes de qualquer chamada de rede."""
        metodo_entrega = validar_dados_checkout(itens, cliente, metodo_entrega, endereco)
        metodo_pagamento = self._converter_metodo(metodo_pagamento)

        pedido = _montar_pedido(
            itens, cliente, metodo_entrega, endereco, metodo_pagamento,
            self.calcular_frete, self.relogio, usuario_id,
        )
        solicitacao = _montar_solicitacao(pedido, referencia or pedido.id, urls_notificacao)

        # 1. Pedido no provedor
        pedido_provedor = self.pagamento_gateway.criar_pedido(solicitacao)
        pedido.pedido_provedor_id = pedido_provedor.id

        # 2a. PIX: segunda chamada cria a cobrança com validade
        if metodo_pagamento == MetodoPagamento.PIX:
            expira_em = self.relogio() + self.VALIDADE_PIX
            cobranca = self.pagamento_gateway.criar_cobranca_pix(
                pedido_provedor.id, solicitacao.valor_total, expira_em
            )
            pedido = self.pedido_repo.salvar(pedido)
            logger.info("Pedido %s criado (PIX, provedor %s, total %s)", pedido.id, pedido_provedor.id, pedido.total)
            return ResultadoCheckoutPix(
                pedido=pedido,
                codigo=cobranca.codigo,
                qr_code_url=cobranca.qr_code_url,
                expira_em=cobranca.expira_em or expira_em,
            )

        # 2b. Cartão/boleto: checkout hospedado
        url = pedido_provedor.link_redirecionamento()
        if not url:
            logger.error("Provedor não retornou links para o pedido %s", pedido_provedor.id)
            raise SemLinkPagamentoError()

        pedido.link_pagamento = url
        pedido = self.pedido_repo.salvar(pedido)
        logger.info(
            "Pedido %s criado (%s, provedor %s, total %s)",
            pedido.id, metodo_pagamento.value, pedido_provedor.id, pedido.total,
        )
        return ResultadoCheckoutHospedado(pedido=pedido, url_redirecionamento=url)


class RegistrarPedidoWhatsappUseCase:
    """
    Alternativa ao provedor: registra o pedido aguardando pagamento e devolve
    o link de conversa com a loja para combinar o pagamento manualmente.
    """

    def __init__(self,
                 pedido_repo: IPedidoRepository,
                 calcular_frete: Callable[..., OpcaoFrete],
                 numero_loja: str,
                 relogio: Callable = agora):
        self.pedido_repo = pedido_repo
        self.calcular_frete = calcular_frete
        self.numero_loja = limpar_digitos(numero_loja)
        self.relogio = relogio

    def executar(
        self,
        itens: Sequence[ItemCarrinho],
        cliente: Cliente,
        metodo_entrega,
        endereco: Optional[Endereco] = None,
        usuario_id: Optional[str] = None,
    ) -> Tuple[Pedido, str]:
        metodo_entrega = validar_dados_checkout(itens, cliente, metodo_entrega, endereco)
        pedido = _montar_pedido(
            itens, cliente, metodo_entrega, endereco, MetodoPagamento.WHATSAPP,
            self.calcular_frete, self.relogio, usuario_id,
        )
        pedido = self.pedido_repo.salvar(pedido)
        logger.info("Pedido %s registrado para finalização via WhatsApp", pedido.id)
        return pedido, f"https://wa.me/{self.numero_loja}?text={quote(self.mensagem(pedido))}"

    @staticmethod
    def mensagem(pedido: Pedido) -> str:
        linhas = [f"Olá! Gostaria de finalizar o pedido {pedido.id}:"]
        for item in pedido.itens:
            linhas.append(
                f"- {item.quantidade}x {item.nome} ({item.tamanho}/{item.cor}) {formatar_moeda(item.subtotal)}"
            )
        if pedido.metodo_entrega == MetodoEntrega.RETIRADA:
            linhas.append("Entrega: retirada na loja")
        else:
            linhas.append(f"Frete: {pedido.frete.servico} {formatar_moeda(pedido.frete.preco)}")
        linhas.append(f"Total: {formatar_moeda(pedido.total)}")
        linhas.append(f"Cliente: {pedido.cliente.nome}")
        return "\n".join(linhas)


# ====================================================================
# 5. CASOS DE USO ADMINISTRATIVOS
# ====================================================================

class GerenciarPedidosAdminUseCase:
    """
    Caso de Uso para listagem e atualização de pedidos (acesso administrativo).
    Qualquer status pode ser definido a partir de qualquer outro; as mudanças são sempre manuais.
    """

    def __init__(self, pedido_repo: IPedidoRepository, relogio: Callable = agora):
        self.pedido_repo = pedido_repo
        self.relogio = relogio

    @staticmethod
    def _converter_status(status) -> StatusPedido:
        try:
            return StatusPedido(str(getattr(status, 'value', status)).lower())
        except ValueError:
            raise StatusInvalidoError(f"O status '{status}' não é um status de pedido válido.")

    def listar_todos(self, status: Optional[str] = None, busca: Optional[str] = None) -> List[Pedido]:
        """Lista os pedidos mais recentes primeiro; a busca considera o nome do cliente ou o ID."""
        if status:
            status = self._converter_status(status).value
        pedidos = self.pedido_repo.listar_todos(status)

        if busca:
            termo = busca.strip().lower()
            pedidos = [
                p for p in pedidos
                if termo in p.cliente.nome.lower() or termo in p.id.lower()
            ]
        return sorted(pedidos, key=lambda p: p.data_criacao, reverse=True)

    def detalhar_pedido(self, pedido_id: str) -> Pedido:
        """Busca os detalhes de um pedido específico."""
        pedido = self.pedido_repo.buscar_por_id(pedido_id)
        if not pedido:
            raise PedidoNaoEncontradoError(f"Pedido ID {pedido_id} não encontrado.")
        return pedido

    def atualizar_status_manual(self, pedido_id: str, novo_status: str) -> Pedido:
        """
        Atualiza o status de um pedido manualmente.
        'pago' registra a data de pagamento a cada marcação; os demais status a limpam.
        """
        status = self._converter_status(novo_status)
        pedido = self.detalhar_pedido(pedido_id)
        anterior = pedido.status

        pedido.status = status
        pedido.data_pagamento = self.relogio() if status == StatusPedido.PAGO else None

        pedido_final = self.pedido_repo.salvar(pedido)
        logger.info("Pedido %s: status %s -> %s", pedido_id, anterior.value, status.value)
        return pedido_final

    def definir_link_pagamento(self, pedido_id: str, link: Optional[str]) -> Pedido:
        pedido = self.detalhar_pedido(pedido_id)
        pedido.link_pagamento = link.strip() if link and link.strip() else None
        return self.pedido_repo.salvar(pedido)


# ====================================================================
# 6. CASOS DE USO DE USUÁRIOS
# ====================================================================

class SincronizarUsuarioUseCase:
    """No primeiro acesso cria o perfil com papel 'user'; perfis existentes mantêm o papel."""

    def __init__(self, usuario_repo: IUsuarioRepository):
        self.usuario_repo = usuario_repo

    def executar(self, usuario_id: str, nome: str, email: str, foto_url: Optional[str] = None) -> Usuario:
        existente = self.usuario_repo.buscar_por_id(usuario_id)
        if existente:
            return existente

        usuario = Usuario(id=usuario_id, nome=nome or email, email=email, papel='user', foto_url=foto_url)
        logger.info("Perfil criado para o usuário %s", usuario_id)
        return self.usuario_repo.salvar(usuario)
