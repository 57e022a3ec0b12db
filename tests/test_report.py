from marmita_ops.core.report import build_report, format_report


def test_empty_ledger_has_zero_margin(ledger):
    report = build_report(ledger)
    assert report.revenue == 0
    assert report.margin == 0
    assert "Margem: 0.0%" in format_report(report)


def test_report_totals(ledger):
    ledger.record_sale("marmita", 30.0, 18.0)
    ledger.record_sale("marmita fit", 25.0, 15.0)
    ledger.upsert_ingredient_cost("arroz", 5.0)

    report = build_report(ledger)
    assert report.revenue == 55.0
    assert report.cost == 33.0
    assert report.profit == 22.0
    assert report.margin == 40.0
    assert report.ingredient_count == 1
    assert report.sale_count == 2


def test_report_reflects_new_sale(ledger):
    before = build_report(ledger)
    ledger.record_sale("marmita", 20.0, 12.5)
    after = build_report(ledger)
    assert after.revenue == before.revenue + 20.0
    assert after.cost == before.cost + 12.5


def test_format_report_layout(ledger):
    ledger.record_sale("marmita", 30.0, 18.0)
    text = format_report(build_report(ledger))
    assert text.splitlines() == [
        "📊 *RELATÓRIO FINANCEIRO*",
        "",
        "💰 Faturamento: R$ 30.00",
        "📉 Custos: R$ 18.00",
        "✅ Lucro: R$ 12.00",
        "📈 Margem: 40.0%",
        "",
        "🥦 Ingredientes cadastrados: 0",
    ]
