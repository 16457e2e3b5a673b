from conftest import FakeConnector

from querypilot.app.services.results import affected_count, normalize
from querypilot.app.validators import formatting
from querypilot.app.validators.formatting import format_sql

ORDERS = [{"id": 1, "total": 9.5}, {"id": 2, "total": 3.0}, {"id": 3, "total": None}]


def test_row_results_pass_through():
    db = FakeConnector()
    out = normalize([{"id": 1}, {"id": 2}], "select id from users", db)
    assert out.rows == [{"id": 1}, {"id": 2}]
    assert out.row_count == 2
    assert out.affected_row_count is None
    assert out.query_type == "select"
    assert db.executed == []


def test_mutation_takes_table_snapshot():
    db = FakeConnector({"SELECT * FROM orders LIMIT 100": ORDERS})
    out = normalize({"affectedRows": 3}, "UPDATE orders SET total = 0 WHERE id > 0", db)
    assert out.affected_row_count == 3
    assert out.row_count == 3
    assert out.rows == ORDERS
    assert db.executed == ["SELECT * FROM orders LIMIT 100"]


def test_snapshot_failure_is_swallowed():
    db = FakeConnector({"SELECT * FROM orders LIMIT 100": RuntimeError("no such table: orders")})
    out = normalize({"changes": -1}, "DROP TABLE orders", db)
    assert out.affected_row_count == 0
    assert out.row_count == 0
    assert out.rows == []


def test_no_snapshot_without_table():
    db = FakeConnector()
    out = normalize({"rowcount": 0}, "CREATE INDEX idx ON users (name)", db)
    assert out.rows == []
    assert db.executed == []


def test_affected_count_field_names():
    assert affected_count({"affectedRows": 4, "insertId": 9}) == 4
    assert affected_count({"rowcount": 2, "statusmessage": "UPDATE 2"}) == 2
    assert affected_count({"changes": 1, "lastInsertRowid": 1}) == 1
    assert affected_count({"rowCount": 7}) == 7
    assert affected_count({}) == 0
    assert affected_count({"rowcount": -1}) == 0


def test_response_shape():
    db = FakeConnector({"SELECT * FROM orders LIMIT 100": ORDERS})
    read = normalize(ORDERS, "SELECT * FROM orders", db).to_response()
    assert "affectedRowCount" not in read
    assert read["requiresConfirmation"] is False
    write = normalize({"affectedRows": 3}, "DELETE FROM orders", db).to_response()
    assert write["affectedRowCount"] == 3
    assert write["rowCount"] == 3
    assert write["queryType"] == "delete"


def test_format_uppercases_keywords():
    out = format_sql("select id, name from users where id = 5")
    assert "SELECT" in out and "FROM users" in out and "WHERE" in out
    assert "\n" in out


def test_format_falls_back_to_input(monkeypatch):
    def boom(*a, **kw):
        raise ValueError("parse error")

    monkeypatch.setattr(formatting.sqlglot, "transpile", boom)
    assert format_sql("select  1") == "select  1"


def test_snapshot_uses_identifier_as_written():
    snap = 'SELECT * FROM "Public"."Orders" LIMIT 100'
    db = FakeConnector({snap: ORDERS})
    out = normalize({"rowcount": 3}, 'UPDATE "Public"."Orders" SET total = 0', db)
    assert db.executed == [snap]
    assert out.row_count == 3
