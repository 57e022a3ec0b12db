import os
import pytest

from marmita_ops.core.ledger import Ledger
from marmita_ops.db.database import init_db

OWNER = "5511900000000@c.us"


@pytest.fixture(scope="session", autouse=True)
def set_test_env(tmp_path_factory):
    db_file = tmp_path_factory.mktemp("data") / "test.db"
    os.environ["DB_PATH"] = str(db_file)
    os.environ["APP_PASSWORD"] = "testpass"
    os.environ["SECRET_KEY"] = "test-secret-key-for-testing"
    os.environ["OWNER_NUMBER"] = OWNER
    os.environ.pop("ANTHROPIC_API_KEY", None)


@pytest.fixture
def ledger(tmp_path):
    path = tmp_path / "ledger.db"
    init_db(path)
    return Ledger(path)


@pytest.fixture
def broken_ledger(tmp_path):
    """A ledger whose DB file exists but has no tables, so every query fails."""
    return Ledger(tmp_path / "empty.db")


class FakeClassifier:
    """Returns canned action codes in order, repeating the last one."""

    def __init__(self, *responses):
        self.responses = list(responses) or ["ACAO:NAO_ENTENDI"]
        self.messages = []

    def classify(self, message):
        self.messages.append(message)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class FakeSender:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send_text(self, to, text):
        if self.fail:
            raise RuntimeError("transport down")
        self.sent.append((to, text))
        return True


@pytest.fixture(scope="session")
def client(set_test_env):
    from fastapi.testclient import TestClient
    from app.main import app
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


@pytest.fixture(scope="session")
def authed_client(client):
    client.post("/login", data={"password": "testpass"}, follow_redirects=False)
    return client
