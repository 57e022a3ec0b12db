from types import SimpleNamespace

from marmita_ops.core.classifier import NOT_UNDERSTOOD, Classifier, build_prompt


def _client(text=None, error=None):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if error:
            raise error
        return SimpleNamespace(content=[SimpleNamespace(text=text)])

    return SimpleNamespace(messages=SimpleNamespace(create=create)), calls


def test_returns_model_text_stripped():
    client, calls = _client("  ACAO:RELATORIO\n")
    assert Classifier(client=client, model="test-model").classify("relatório") == "ACAO:RELATORIO"
    assert calls[0]["model"] == "test-model"
    assert "relatório" in calls[0]["messages"][0]["content"]


def test_prompt_embeds_every_tag():
    prompt = build_prompt("venda marmita 30 custo 18")
    for tag in ("ATUALIZAR_CUSTO", "REGISTRAR_VENDA", "RELATORIO", "NAO_ENTENDI"):
        assert f"ACAO:{tag}" in prompt
    assert "venda marmita 30 custo 18" in prompt


def test_api_error_falls_back():
    client, _ = _client(error=ConnectionError("boom"))
    assert Classifier(client=client).classify("oi") == NOT_UNDERSTOOD


def test_empty_response_falls_back():
    client, _ = _client("   ")
    assert Classifier(client=client).classify("oi") == NOT_UNDERSTOOD


def test_missing_api_key_falls_back(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setattr("marmita_ops.config.get_setting", lambda key, default=None: default)
    assert Classifier().classify("oi") == NOT_UNDERSTOOD


def test_unreadable_settings_falls_back(monkeypatch, tmp_path):
    empty_db = tmp_path / "no_tables.db"
    empty_db.touch()
    monkeypatch.setenv("DB_PATH", str(empty_db))
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    assert Classifier().classify("oi") == NOT_UNDERSTOOD


def test_bad_timeout_falls_back(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
    monkeypatch.setenv("CLASSIFIER_TIMEOUT", "soon")
    assert Classifier().classify("oi") == NOT_UNDERSTOOD
