from conftest import FakeClassifier

from marmita_ops.core.dispatcher import (
    COST_ERROR,
    COST_UPDATED,
    HELP_MENU,
    INGREDIENT_CREATED,
    REPORT_ERROR,
    SALE_ERROR,
    Dispatcher,
)


def test_update_cost_creates_then_updates(ledger):
    d = Dispatcher(ledger, FakeClassifier("ACAO:ATUALIZAR_CUSTO|ITEM:arroz|VALOR:5",
                                          "ACAO:ATUALIZAR_CUSTO|ITEM:arroz|VALOR:6"))
    assert d.handle("cadastra arroz 5") == INGREDIENT_CREATED
    assert d.handle("altera custo arroz 6") == COST_UPDATED
    assert ledger.find_ingredient("arroz")[0].unit_cost == 6.0


def test_register_sale_reply(ledger):
    d = Dispatcher(ledger, FakeClassifier("ACAO:REGISTRAR_VENDA|PRODUTO:marmita|VALOR:30|CUSTO:18"))
    reply = d.handle("venda marmita 30 custo 18")
    assert reply.splitlines() == [
        "Venda registrada!",
        "Produto: marmita",
        "Venda: R$ 30.00",
        "Custo: R$ 18.00",
        "Lucro: R$ 12.00",
    ]
    assert "Lucro: R$ 12" in reply
    assert len(ledger.fetch_all_sales()) == 1


def test_report_reply(ledger):
    ledger.record_sale("marmita", 30.0, 18.0)
    reply = Dispatcher(ledger, FakeClassifier("ACAO:RELATORIO")).handle("relatório")
    assert "RELATÓRIO FINANCEIRO" in reply
    assert "Lucro: R$ 12.00" in reply


def test_unrecognized_replies_help_menu(ledger):
    for code in ("blah", "ACAO:NAO_ENTENDI", "ACAO:ATUALIZAR_CUSTO|ITEM:arroz|VALOR:abc"):
        assert Dispatcher(ledger, FakeClassifier(code)).handle("???") == HELP_MENU
    assert ledger.fetch_all_ingredients() == []


def test_help_menu_lists_examples():
    assert '"Altera custo arroz 5"' in HELP_MENU
    assert '"Venda marmita 30 custo 18"' in HELP_MENU
    assert '"Relatório"' in HELP_MENU


def test_store_errors_become_error_lines(broken_ledger):
    sale = Dispatcher(broken_ledger, FakeClassifier("ACAO:REGISTRAR_VENDA|PRODUTO:m|VALOR:1|CUSTO:1"))
    assert sale.handle("venda") == SALE_ERROR
    cost = Dispatcher(broken_ledger, FakeClassifier("ACAO:ATUALIZAR_CUSTO|ITEM:arroz|VALOR:5"))
    assert cost.handle("custo") == COST_ERROR
    report = Dispatcher(broken_ledger, FakeClassifier("ACAO:RELATORIO"))
    assert report.handle("relatório") == REPORT_ERROR
