"""Dispatcher: turn one inbound message into exactly one reply.

classify -> parse -> execute, fully synchronous and with no state carried
between messages.  Store errors become fixed error lines; classifier and
parser faults become the help menu.
"""

import logging

from marmita_ops.core.classifier import Classifier
from marmita_ops.core.commands import (
    ParsedAction,
    RegisterSale,
    Report,
    UpdateCost,
    parse_action,
)
from marmita_ops.core.ledger import Ledger
from marmita_ops.core.report import build_report, format_report
from marmita_ops.db.models import UpsertOutcome
from marmita_ops.errors import StoreError

log = logging.getLogger(__name__)

COST_UPDATED = "Custo atualizado com sucesso!"
INGREDIENT_CREATED = "Novo ingrediente cadastrado!"
COST_ERROR = "Erro ao salvar custo."
SALE_ERROR = "Erro ao salvar venda."
REPORT_ERROR = "Erro ao gerar relatório."

HELP_MENU = (
    "Olá! Sou seu assistente de gestão.\n"
    "\n"
    "Comandos disponíveis:\n"
    '• "Altera custo arroz 5" (Custo)\n'
    '• "Venda marmita 30 custo 18" (Venda)\n'
    '• "Relatório" (Dados)'
)


def format_sale(product: str, sale_price: float, production_cost: float, profit: float) -> str:
    return (
        "Venda registrada!\n"
        f"Produto: {product}\n"
        f"Venda: R$ {sale_price:.2f}\n"
        f"Custo: R$ {production_cost:.2f}\n"
        f"Lucro: R$ {profit:.2f}"
    )


class Dispatcher:
    def __init__(self, ledger: Ledger, classifier: Classifier):
        self.ledger = ledger
        self.classifier = classifier
        self._handlers = {
            UpdateCost: self._update_cost,
            RegisterSale: self._register_sale,
            Report: self._report,
        }

    def handle(self, message: str) -> str:
        """Classify and execute message, returning the reply text."""
        action = parse_action(self.classifier.classify(message))
        return self.execute(action)

    def execute(self, action: ParsedAction) -> str:
        handler = self._handlers.get(type(action))
        if handler is None:
            log.info("Unrecognized message (%s), sending help menu", getattr(action, "reason", "") or "no reason")
            return HELP_MENU
        return handler(action)

    def _update_cost(self, action: UpdateCost) -> str:
        try:
            outcome = self.ledger.upsert_ingredient_cost(action.item, action.value)
        except StoreError:
            log.error("Could not save cost for %r", action.item, exc_info=True)
            return COST_ERROR
        return COST_UPDATED if outcome is UpsertOutcome.UPDATED else INGREDIENT_CREATED

    def _register_sale(self, action: RegisterSale) -> str:
        try:
            sale = self.ledger.record_sale(action.product, action.value, action.cost)
        except StoreError:
            log.error("Could not record sale of %r", action.product, exc_info=True)
            return SALE_ERROR
        return format_sale(sale.product, sale.sale_price, sale.production_cost, sale.profit)

    def _report(self, action: Report) -> str:
        try:
            return format_report(build_report(self.ledger))
        except StoreError:
            log.error("Could not build report", exc_info=True)
            return REPORT_ERROR
