MENSAGEM_FALHA_PAGAMENTO = "Não foi possível iniciar o pagamento. Tente novamente."


class BaseErroCore(Exception):
    """Classe base para todas as exceções da Camada Core."""
    pass

# ===============================================
# ERROS DE VALIDAÇÃO (nunca chegam à rede)
# ===============================================

class DadosInvalidosError(BaseErroCore):
    """Erro levantado quando dados inválidos são fornecidos."""
    def __init__(self, message="Os dados fornecidos são inválidos."):
        self.message = message
        super().__init__(self.message)

class CarrinhoVazioError(DadosInvalidosError):
    """Erro levantado ao tentar fazer checkout com carrinho vazio."""
    def __init__(self, message="O carrinho de compras está vazio."):
        super().__init__(message)

class DadosClienteIncompletosError(DadosInvalidosError):
    """Nome, e-mail, telefone ou CPF ausentes."""
    def __init__(self, message="Preencha nome, e-mail, telefone e CPF."):
        super().__init__(message)

class EnderecoIncompletoError(DadosInvalidosError):
    """Erro levantado quando falta algum campo do endereço de entrega."""
    def __init__(self, message="Preencha o endereço completo para entrega."):
        super().__init__(message)

class FreteIndisponivelError(DadosInvalidosError):
    def __init__(self, message="Não foi possível calcular o frete para o CEP informado."):
        super().__init__(message)

class QuantidadeInvalidaError(DadosInvalidosError):
    def __init__(self, message="A quantidade deve ser maior ou igual a 1."):
        super().__init__(message)

class PrecoPromocionalInvalidoError(DadosInvalidosError):
    def __init__(self, message="O preço promocional deve ser menor que o preço base."):
        super().__init__(message)

class MetodoPagamentoInvalidoError(DadosInvalidosError):
    def __init__(self, message="Método de pagamento não suportado."):
        super().__init__(message)

# ===============================================
# ERROS DE PERSISTÊNCIA E ENTIDADE
# ===============================================

class ItemNaoEncontradoError(BaseErroCore):
    """Erro levantado quando um item (genérico) não é encontrado."""
    def __init__(self, message="O item solicitado não foi encontrado."):
        self.message = message
        super().__init__(self.message)

class ProdutoNaoEncontradoError(ItemNaoEncontradoError):
    """Erro levantado quando um produto específico não é encontrado."""
    def __init__(self, message="O produto solicitado não foi encontrado."):
        super().__init__(message)

class PedidoNaoEncontradoError(ItemNaoEncontradoError):
    """Erro específico para Pedidos não encontrados."""
    def __init__(self, message="O pedido solicitado não foi encontrado."):
        super().__init__(message)

class StatusInvalidoError(BaseErroCore):
    """Erro levantado ao tentar definir um status de pedido inválido."""
    def __init__(self, message="O status fornecido não é válido para um pedido."):
        self.message = message
        super().__init__(self.message)

# ===============================================
# ERROS DE SERVIDOR E SERVIÇOS EXTERNOS
# ===============================================

class ConfiguracaoServidorError(BaseErroCore):
    """Credencial de serviço externo ausente no servidor."""
    def __init__(self, message="Erro de configuração do servidor. Tente novamente mais tarde."):
        self.message = message
        super().__init__(self.message)

class PagamentoFalhouError(BaseErroCore):
    """Erro levantado quando o Gateway de Pagamento rejeita a transação."""
    def __init__(self, message="A transação de pagamento foi rejeitada ou falhou."):
        self.message = message
        super().__init__(self.message)

class ProvedorPagamentoError(PagamentoFalhouError):
    """
    Resposta HTTP fora da faixa 2xx vinda do provedor.
    Carrega o status e o corpo de erro original para que o cliente possa corrigir o pedido.
    """
    def __init__(self, status_code: int, detalhes=None, message="O provedor de pagamento recusou a solicitação."):
        self.status_code = status_code
        self.detalhes = detalhes
        super().__init__(message)

class SemLinkPagamentoError(PagamentoFalhouError):
    def __init__(self, message="O provedor não retornou um link de pagamento."):
        super().__init__(message)

class RespostaInvalidaProvedorError(PagamentoFalhouError):
    """Resposta 2xx que não respeita o contrato esperado."""
    def __init__(self, message=MENSAGEM_FALHA_PAGAMENTO):
        super().__init__(message)

class FalhaComunicacaoPagamentoError(PagamentoFalhouError):
    """Falha de rede ou de leitura da resposta; o detalhe fica apenas no log."""
    def __init__(self, message=MENSAGEM_FALHA_PAGAMENTO):
        super().__init__(message)

class UploadImagemError(BaseErroCore):
    def __init__(self, message="Não foi possível enviar a imagem.", detalhes=None):
        self.message = message
        self.detalhes = detalhes
        super().__init__(self.message)
