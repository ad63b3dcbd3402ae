import base64
import logging
import time
from datetime import datetime
from typing import Optional

import requests
from django.conf import settings
from django.utils.dateparse import parse_datetime

# Importa os Protocols e Entidades da camada Core
from completa.core.entities import Endereco, MetodoPagamento
from completa.core.exceptions import (
    ConfiguracaoServidorError,
    FalhaComunicacaoPagamentoError,
    ProvedorPagamentoError,
    RespostaInvalidaProvedorError,
    UploadImagemError,
)
from completa.core.frete import limpar_digitos
from completa.core.pagamento import CobrancaPix, LinkProvedor, PedidoProvedor, SolicitacaoPedidoPagamento
from completa.core.ports import IArmazenamentoImagens, IConsultaCep, IGatewayPagamento

logger = logging.getLogger(__name__)


# ====================================================================
# GATEWAYS: Implementações concretas que se comunicam com APIs externas.
# ====================================================================

class PagBankGateway(IGatewayPagamento):
    """
    Gateway para comunicação com a API de Pedidos do PagBank.
    Implementa a interface IGatewayPagamento do Core: pedido com checkout
    hospedado (cartão/boleto) e cobrança PIX sobre um pedido existente.
    """

    URLS_BASE = {
        'production': 'https://api.pagseguro.com',
        'sandbox': 'https://sandbox.api.pagseguro.com',
    }

    # Métodos oferecidos na página hospedada; PIX não usa redirecionamento
    _TIPOS_PAGAMENTO = {
        MetodoPagamento.CARTAO: 'CREDIT_CARD',
        MetodoPagamento.BOLETO: 'BOLETO',
    }

    # --- CONFIGURAÇÃO (lida a cada chamada) ---

    @property
    def api_base_url(self) -> str:
        ambiente = getattr(settings, 'PAGBANK_ENV', 'sandbox')
        return self.URLS_BASE.get(ambiente, self.URLS_BASE['sandbox'])

    def _headers(self) -> dict:
        token = getattr(settings, 'PAGBANK_TOKEN', '')
        if not token:
            logger.error("PAGBANK_TOKEN não configurado.")
            raise ConfiguracaoServidorError()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "accept": "application/json",
        }

    # --- MÉTODOS PRIVADOS DE COMUNICAÇÃO ---

    def _post(self, caminho: str, payload: dict) -> dict:
        """Envia o POST e devolve o corpo JSON de uma resposta 2xx."""
        headers = self._headers()
        url = f"{self.api_base_url}{caminho}"
        try:
            response = requests.post(
                url, json=payload, headers=headers, timeout=getattr(settings, 'PAGBANK_TIMEOUT', 15)
            )
        except requests.exceptions.RequestException:
            logger.exception("Falha de comunicação com o PagBank em %s", caminho)
            raise FalhaComunicacaoPagamentoError()

        if not response.ok:
            # Páginas de erro (HTML) também carregam o status do provedor
            try:
                data = response.json()
            except ValueError:
                data = response.text
            logger.error("Erro PagBank API (%s) em %s: %s", response.status_code, caminho, data)
            detalhes = data.get('error_messages') or data if isinstance(data, dict) else data
            raise ProvedorPagamentoError(response.status_code, detalhes)

        try:
            data = response.json()
        except ValueError:
            logger.exception("Resposta ilegível do PagBank em %s", caminho)
            raise FalhaComunicacaoPagamentoError()

        if not isinstance(data, dict):
            raise RespostaInvalidaProvedorError()
        return data

    @staticmethod
    def _montar_payload(solicitacao: SolicitacaoPedidoPagamento) -> dict:
        cliente = solicitacao.cliente
        endereco = solicitacao.endereco_entrega
        payload = {
            "reference_id": solicitacao.referencia,
            "customer": {
                "name": cliente.nome,
                "email": cliente.email,
                "tax_id": limpar_digitos(cliente.cpf),
                "phones": [
                    {"country": t.pais, "area": t.area, "number": t.numero, "type": t.tipo}
                    for t in cliente.telefones
                ],
            },
            "items": [
                {
                    "reference_id": item.referencia,
                    "name": item.nome,
                    "quantity": item.quantidade,
                    "unit_amount": item.valor_unitario,
                }
                for item in solicitacao.itens
            ],
            "amount": {"value": solicitacao.valor_total, "currency": "BRL"},
            "shipping": {
                "amount": solicitacao.valor_frete,
                "address": {
                    "street": endereco.rua,
                    "number": endereco.numero,
                    "complement": endereco.complemento,
                    "locality": endereco.bairro,
                    "city": endereco.cidade,
                    "region_code": endereco.estado,
                    "country": endereco.pais,
                    "postal_code": endereco.cep,
                },
            },
        }
        if solicitacao.urls_notificacao:
            payload["notification_urls"] = list(solicitacao.urls_notificacao)

        tipo = PagBankGateway._TIPOS_PAGAMENTO.get(solicitacao.metodo)
        if tipo:
            payload["payment_methods"] = [{"type": tipo}]
        return payload

    @staticmethod
    def _ler_links(data: dict):
        links = data.get("links") or []
        if not isinstance(links, list):
            raise RespostaInvalidaProvedorError()
        lidos = []
        for link in links:
            if not isinstance(link, dict) or not link.get("href"):
                continue
            lidos.append(LinkProvedor(rel=str(link.get("rel", "")), href=link["href"], media=link.get("media")))
        return tuple(lidos)

    # --- MÉTODOS PÚBLICOS QUE IMPLEMENTAM O PROTOCOLO CORE ---

    def criar_pedido(self, solicitacao: SolicitacaoPedidoPagamento) -> PedidoProvedor:
        data = self._post("/orders", self._montar_payload(solicitacao))
        if not data.get("id"):
            logger.error("Resposta do PagBank sem ID de pedido: %s", data)
            raise RespostaInvalidaProvedorError()
        return PedidoProvedor(id=str(data["id"]), links=self._ler_links(data))

    def criar_cobranca_pix(self, pedido_provedor_id: str, valor: int, expira_em: datetime) -> CobrancaPix:
        payload = {
            "charges": [
                {
                    "reference_id": pedido_provedor_id,
                    "amount": {"value": valor, "currency": "BRL"},
                    "payment_method": {
                        "type": "PIX",
                        "pix": {"expiration_date": expira_em.isoformat()},
                    },
                }
            ]
        }
        data = self._post(f"/orders/{pedido_provedor_id}/pay", payload)

        qr = self._extrair_qr_code(data)
        if not qr or not qr.get("text"):
            logger.error("Resposta do PagBank sem código PIX para o pedido %s", pedido_provedor_id)
            raise RespostaInvalidaProvedorError()

        imagem = next(
            (l.href for l in self._ler_links(qr) if l.rel.upper() == "QRCODE.PNG"),
            None,
        )
        expiracao = qr.get("expiration_date")
        return CobrancaPix(
            id=str(qr.get("id") or pedido_provedor_id),
            codigo=qr["text"],
            qr_code_url=imagem,
            expira_em=parse_datetime(expiracao) if expiracao else None,
        )

    @staticmethod
    def _extrair_qr_code(data: dict) -> Optional[dict]:
        """O QR Code vem em 'qr_codes' ou dentro da primeira cobrança."""
        qr_codes = data.get("qr_codes")
        if isinstance(qr_codes, list) and qr_codes and isinstance(qr_codes[0], dict):
            return qr_codes[0]
        charges = data.get("charges")
        if isinstance(charges, list) and charges and isinstance(charges[0], dict):
            pix = (charges[0].get("payment_method") or {}).get("pix")
            if isinstance(pix, dict):
                return pix
        return None


class ViaCepGateway(IConsultaCep):
    """Consulta de endereço por CEP na API pública do ViaCEP."""

    base_url = "https://viacep.com.br/ws"

    def buscar_endereco(self, cep: str) -> Optional[Endereco]:
        cep_limpo = limpar_digitos(cep)
        if len(cep_limpo) != 8:
            return None

        try:
            response = requests.get(f"{self.base_url}/{cep_limpo}/json/", timeout=10)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError):
            logger.exception("Erro ao consultar o CEP %s", cep_limpo)
            return None

        if data.get("erro"):
            return None

        return Endereco(
            cep=cep_limpo,
            rua=data.get("logradouro", ""),
            numero="",
            complemento=data.get("complemento") or None,
            bairro=data.get("bairro", ""),
            cidade=data.get("localidade", ""),
            estado=data.get("uf", ""),
        )


class GitHubImagemGateway(IArmazenamentoImagens):
    """
    Publica imagens de produtos no repositório de assets via API de conteúdo
    do GitHub e devolve a URL servida pelo CDN jsDelivr.
    """

    api_url = "https://api.github.com"

    def enviar(self, conteudo_base64: str, nome_arquivo: Optional[str] = None) -> str:
        token = getattr(settings, 'GITHUB_TOKEN', '')
        if not token:
            logger.error("GITHUB_TOKEN não configurado.")
            raise ConfiguracaoServidorError()

        # Aceita data URLs ("data:image/png;base64,....")
        if conteudo_base64.startswith("data:") and "," in conteudo_base64:
            conteudo_base64 = conteudo_base64.split(",", 1)[1]
        try:
            base64.b64decode(conteudo_base64, validate=True)
        except ValueError:
            raise UploadImagemError("O arquivo enviado não está em base64 válido.")

        repositorio = settings.GITHUB_ASSETS_REPO
        branch = settings.GITHUB_ASSETS_BRANCH
        nome = f"{int(time.time() * 1000)}-{nome_arquivo or 'image.jpg'}"
        caminho = f"public/products/{nome}"

        try:
            response = requests.put(
                f"{self.api_url}/repos/{repositorio}/contents/{caminho}",
                json={
                    "message": f"Upload product image: {nome}",
                    "content": conteudo_base64,
                    "branch": branch,
                },
                headers={
                    "Authorization": f"Bearer {token}",
                    "Accept": "application/vnd.github+json",
                },
                timeout=30,
            )
        except requests.exceptions.RequestException:
            logger.exception("Falha de comunicação com o GitHub ao enviar %s", nome)
            raise UploadImagemError()

        if not response.ok:
            try:
                detalhes = response.json()
            except ValueError:
                detalhes = response.text
            logger.error("Erro GitHub API (%s) ao enviar %s: %s", response.status_code, nome, detalhes)
            raise UploadImagemError(detalhes=detalhes)

        logger.info("Imagem %s publicada em %s", nome, repositorio)
        return f"https://cdn.jsdelivr.net/gh/{repositorio}@{branch}/{caminho}"
