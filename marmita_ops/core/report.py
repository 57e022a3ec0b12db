"""Financial report: revenue, cost, profit and margin over every recorded sale."""

from marmita_ops.core.ledger import Ledger
from marmita_ops.db.models import FinancialReport


def build_report(ledger: Ledger) -> FinancialReport:
    """Aggregate the full sales history. Margin is 0 when there is no revenue."""
    sales = ledger.fetch_all_sales()
    ingredients = ledger.fetch_all_ingredients()

    revenue = sum(s.sale_price for s in sales)
    cost = sum(s.production_cost for s in sales)
    profit = revenue - cost
    margin = round(profit / revenue * 100, 1) if revenue > 0 else 0.0

    return FinancialReport(
        revenue=round(revenue, 2),
        cost=round(cost, 2),
        profit=round(profit, 2),
        margin=margin,
        ingredient_count=len(ingredients),
        sale_count=len(sales),
    )


def format_report(report: FinancialReport) -> str:
    """Render the report as the WhatsApp message body (bold via *asterisks*)."""
    return (
        "📊 *RELATÓRIO FINANCEIRO*\n"
        "\n"
        f"💰 Faturamento: R$ {report.revenue:.2f}\n"
        f"📉 Custos: R$ {report.cost:.2f}\n"
        f"✅ Lucro: R$ {report.profit:.2f}\n"
        f"📈 Margem: {report.margin:.1f}%\n"
        "\n"
        f"🥦 Ingredientes cadastrados: {report.ingredient_count}"
    )
