"""Claude intent classifier: maps a free-text WhatsApp message to an action code.

The model is asked to answer with a single pipe-delimited code line such as
ACAO:REGISTRAR_VENDA|PRODUTO:marmita|VALOR:30|CUSTO:18.  Its answer is
returned untouched; decoding and validation live in core/commands.py.
Any failure here is logged and downgraded to ACAO:NAO_ENTENDI.
"""

import logging
import sqlite3

from marmita_ops import config
from marmita_ops.errors import ClassifierError

log = logging.getLogger(__name__)

NOT_UNDERSTOOD = "ACAO:NAO_ENTENDI"

# Instruction contract sent with every message. The four codes here are the
# complete output vocabulary the parser accepts.
PROMPT_TEMPLATE = """Você é um assistente de gestão para um delivery de marmitas.
Analise a mensagem do usuário e determine a ação.

Mensagem: "{message}"

Regras:
1. Se for pedido para alterar/cadastrar custo de ingrediente (ex: "altera custo arroz 5" ou "cadastra tomate 10"), retorne no formato: ACAO:ATUALIZAR_CUSTO|ITEM:arroz|VALOR:5
2. Se for pedido para registrar venda (ex: "venda marmita 30 custo 18"), retorne: ACAO:REGISTRAR_VENDA|PRODUTO:marmita|VALOR:30|CUSTO:18
3. Se for pedido relatório ou análise, retorne: ACAO:RELATORIO
4. Se não entender, retorne: ACAO:NAO_ENTENDI

Responda APENAS com o código formatado acima."""


def build_prompt(message: str) -> str:
    return PROMPT_TEMPLATE.format(message=message.replace('"', "'"))


class Classifier:
    """Thin bridge to the Anthropic Messages API.

    Pass an Anthropic-compatible client (anything with messages.create) to
    skip key lookup, e.g. a fake in tests.
    """

    def __init__(self, client=None, model: str = None, max_tokens: int = 100):
        self._client = client
        self.model = model or config.get_classifier_model()
        self.max_tokens = max_tokens

    def _get_client(self):
        """Create the Anthropic client on first use. Raises ClassifierError if the API key is not set."""
        if self._client is None:
            import anthropic
            try:
                api_key = config.get_api_key()
                timeout = config.get_classifier_timeout()
            except (sqlite3.Error, ValueError) as e:
                raise ClassifierError(f"Classifier configuration unreadable: {e}") from e
            if not api_key:
                raise ClassifierError("Claude API key not set. Set ANTHROPIC_API_KEY or save it under /settings.")
            self._client = anthropic.Anthropic(api_key=api_key, timeout=timeout)
        return self._client

    def _ask(self, message: str) -> str:
        client = self._get_client()
        try:
            response = client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": build_prompt(message)}],
            )
            text = response.content[0].text if response.content else ""
        except Exception as e:
            raise ClassifierError(f"Classifier request failed: {e}") from e
        text = (text or "").strip()
        if not text:
            raise ClassifierError("Classifier returned an empty response")
        return text

    def classify(self, message: str) -> str:
        """Return the raw action code for message, or ACAO:NAO_ENTENDI on any failure."""
        try:
            decision = self._ask(message)
        except ClassifierError:
            log.warning("Classifier failed, falling back to %s", NOT_UNDERSTOOD, exc_info=True)
            return NOT_UNDERSTOOD
        log.info("Classifier decided: %s", decision)
        return decision
