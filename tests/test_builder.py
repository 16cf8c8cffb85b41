"""Unit tests for Query construction, build() and execute() dispatch."""

from __future__ import annotations

import pytest

from reefql.compile.sqlite import SQLiteDialect
from reefql.errors import ExecutionError
from reefql.query.builder import Query
from reefql.query.plan import QueryKind
from tests.fixtures import RecordingConnection


def test_new_query_defaults_to_select_star():
    q = Query(SQLiteDialect(), "t")
    assert q.kind is QueryKind.SELECT
    assert q.plan.columns == ["*"]
    assert str(q) == 'SELECT "t".* FROM "t";'


def test_statement_methods_set_kind():
    dialect = SQLiteDialect()
    assert Query(dialect, "t").insert({"a": 1}).kind is QueryKind.INSERT
    assert Query(dialect, "t").update({"a": 1}).kind is QueryKind.UPDATE
    assert Query(dialect, "t").delete().kind is QueryKind.DELETE
    assert Query(dialect, "t").drop_table().kind is QueryKind.DROP
    assert QueryKind.SELECT.is_read
    assert not QueryKind.DELETE.is_read


def test_build_is_repeatable():
    q = Query(SQLiteDialect(), "t").select("id").where("id", 1)
    first, second = q.build(), q.build()
    assert first.sql == second.sql
    assert first.params == second.params == [1]


def test_build_params_are_a_copy():
    q = Query(SQLiteDialect(), "t").select().where("id", 1)
    q.build().params.append("junk")
    assert q.params == [1]


def test_execute_without_connection_raises():
    with pytest.raises(ExecutionError):
        Query(SQLiteDialect(), "t").select().execute()


def test_select_goes_to_run_select(recorder: RecordingConnection):
    recorder.rows = [{"id": 1}]
    rows = recorder.table("t").select("id").where("id", 1).execute()
    assert rows == [{"id": 1}]
    assert recorder.selects == [('SELECT "t"."id" FROM "t" WHERE "t"."id"=?;', [1])]
    assert recorder.statements == []


def test_writes_go_to_run_statement(recorder: RecordingConnection):
    assert recorder.table("t").insert({"a": 1}).execute() is True
    recorder.table("t").update({"a": 2}).where("id", 5).execute()
    recorder.table("t").delete("id", 5).execute()
    assert recorder.statements == [
        ('INSERT INTO "t" ("a") VALUES (?);', [1]),
        ('UPDATE "t" SET "a"=? WHERE "t"."id"=?;', [2, 5]),
        ('DELETE FROM "t" WHERE "t"."id"=?;', [5]),
    ]
    assert recorder.selects == []


def test_execute_returns_connection_failure_flag():
    connection = RecordingConnection(succeed=False)
    assert connection.table("t").insert({"a": 1}).execute() is False


def test_connection_table_shares_dialect(recorder: RecordingConnection):
    q = recorder.table("articles")
    assert q.dialect is recorder.dialect
    assert q.connection is recorder
    assert q.table == "articles"


def test_repr():
    q = Query(SQLiteDialect(), "t").insert({"a": 1})
    assert repr(q) == "Query(table='t', kind='insert')"
