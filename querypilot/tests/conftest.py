import pytest
from fastapi.testclient import TestClient

from querypilot.app.connectors.base import BaseConnector
from querypilot.app.connectors.manager import ConnectionManager
from querypilot.app.connectors.sqlite import SQLiteConnector
from querypilot.app.dependencies import get_generator
from querypilot.app.main import create_app


class FakeGenerator:
    def __init__(self, sql: str = "SELECT 1"):
        self.sql = sql
        self.calls = []

    def generate_sql(self, question, database, schema_hint=None):
        self.calls.append((question, database, schema_hint))
        return self.sql


class FakeConnector(BaseConnector):
    """Scripted connector: exact SQL -> result, or an exception to raise."""

    KIND = "fake"
    DIALECT = "sqlite"

    def __init__(self, responses=None):
        super().__init__({})
        self.responses = responses or {}
        self.executed = []

    def connect(self):
        self._conn = object()

    def disconnect(self):
        self._conn = None

    def execute(self, sql):
        self.executed.append(sql)
        res = self.responses.get(sql, [])
        if isinstance(res, Exception):
            raise res
        return res

    def describe_schema(self):
        return {"tables": []}


@pytest.fixture
def sqlite_db(tmp_path):
    db = SQLiteConnector({"path": str(tmp_path / "test.sqlite")})
    db.connect()
    db.execute(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, updated_at TEXT)"
    )
    db.execute("INSERT INTO users (id, name) VALUES (1, 'ada'), (5, 'linus'), (7, 'grace')")
    yield db
    db.disconnect()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def app(sqlite_db, generator, monkeypatch):
    monkeypatch.delenv("API_KEY", raising=False)
    manager = ConnectionManager()
    manager.register("sqlite", sqlite_db)
    app = create_app(connections=manager)
    app.dependency_overrides[get_generator] = lambda: generator
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
