import pytest

from querypilot.app.validators.classifier import (
    QueryCategory,
    classify,
    extract_table_name,
)


def test_select_like_statements():
    for sql in ["SELECT * FROM users", "  show tables", "DESCRIBE users", "explain select 1"]:
        stmt = classify(sql)
        assert stmt.category == QueryCategory.SELECT
        assert stmt.query_type == "select"
        assert stmt.mutated_table_name is None


def test_data_mutation_types():
    assert classify("INSERT INTO t VALUES (1)").query_type == "insert"
    assert classify("update t set a = 1").query_type == "update"
    stmt = classify("DELETE FROM users WHERE id = 5")
    assert stmt.category == QueryCategory.DATA_MUTATION
    assert stmt.query_type == "delete"
    assert stmt.mutated_table_name == "users"


def test_schema_keywords_take_priority():
    stmt = classify("ALTER TABLE orders DROP COLUMN note")
    assert stmt.category == QueryCategory.SCHEMA_MUTATION
    # DROP comes before ALTER in the priority list
    assert stmt.query_type == "drop"
    assert stmt.mutated_table_name == "orders"


def test_schema_mutation_beats_data_mutation():
    stmt = classify("CREATE TABLE archive AS SELECT * FROM orders WHERE deleted = 1")
    assert stmt.query_type == "create"
    assert stmt.mutated_table_name == "archive"


def test_word_boundaries():
    stmt = classify("SELECT updated_at, created_by FROM users")
    assert stmt.category == QueryCategory.SELECT


def test_unknown():
    stmt = classify("WITH x AS (SELECT 1) SELECT * FROM x")
    assert stmt.category == QueryCategory.UNKNOWN
    assert stmt.query_type == "unknown"


def test_statement_count():
    assert classify("SELECT 1").statement_count == 1
    assert classify("SELECT 1;").statement_count == 1
    assert classify("SELECT 1; ;  ").statement_count == 1
    assert classify("SELECT * FROM users; DROP TABLE users").statement_count == 2
    assert classify("").statement_count == 0


@pytest.mark.parametrize(
    "sql,table",
    [
        ("INSERT INTO `orders` (id) VALUES (1)", "orders"),
        ('UPDATE "Users" SET name = \'x\'', "Users"),
        ("DELETE FROM public.orders WHERE id = 1", "public.orders"),
        ("CREATE TABLE IF NOT EXISTS logs (id int)", "logs"),
        ("DROP TABLE IF EXISTS 'tmp'", "tmp"),
        ("TRUNCATE TABLE events", "events"),
        ("TRUNCATE events", "events"),
        ("UPDATE a JOIN b ON a.id = b.id SET a.x = 1", None),
        ("CREATE INDEX idx ON users (name)", None),
        ("GRANT SELECT ON users TO bob", None),
    ],
)
def test_table_extraction(sql, table):
    assert extract_table_name(sql) == table


def test_classify_is_pure():
    sql = "UPDATE orders SET status = 'x' WHERE id = 3"
    assert classify(sql) == classify(sql)


def test_keyword_in_literal_is_a_known_limitation():
    stmt = classify("SELECT * FROM notes WHERE body = 'please drop me'")
    assert stmt.category == QueryCategory.SCHEMA_MUTATION


def test_quoted_table_keeps_case_for_queries():
    stmt = classify('DELETE FROM "Public"."Orders" WHERE id = 1')
    assert stmt.mutated_table_name == "Public.Orders"
    assert stmt.mutated_table_ref == '"Public"."Orders"'
    assert classify("TRUNCATE TABLE `Events`").mutated_table_ref == "`Events`"
    assert classify("DROP TABLE 'tmp'").mutated_table_ref == "tmp"
