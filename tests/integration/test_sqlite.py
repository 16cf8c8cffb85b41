"""Integration tests: migrate → query → model against a real SQLite database.

Covers the two-step feed migrations (CREATE then ALTER ADD COLUMN), steps
that add and drop columns at once, the migration ledger, re-running and
reverting migrations (including with pending ones), fluent CRUD with nested
predicate groups, literal quoting, the Model layer and ``reefql.init``.
"""
from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

import reefql
from reefql.connections.sqlite import SQLiteConnection
from reefql.migrate.migration import Migration, SchemaEditor
from reefql.migrate.runner import LEDGER_TABLE, MigrationRunner
from reefql.model import Model
from reefql.schema.context import SchemaContext
from tests.fixtures import FEED_MIGRATIONS

pytestmark = pytest.mark.skipif(
    sqlite3.sqlite_version_info < (3, 35),
    reason="ALTER TABLE ... DROP COLUMN needs SQLite 3.35+",
)


@pytest.fixture()
def db(sqlite_db: SQLiteConnection, context: SchemaContext) -> SQLiteConnection:
    """In-memory database with the feed migrations applied."""
    MigrationRunner(sqlite_db, context).run_directory(FEED_MIGRATIONS)
    return sqlite_db


@pytest.fixture()
def feed(db: SQLiteConnection) -> SQLiteConnection:
    for title, author in [("a", 1), ("b", 2), ("c", 3)]:
        db.table("articles").insert({"title": title, "content": "", "author": author}).execute()
    return db


def _columns(db: SQLiteConnection, table: str) -> list[str]:
    return [row["name"] for row in db.raw.execute(f'PRAGMA table_info("{table}")')]


def _titles(rows: list[dict]) -> list[str]:
    return sorted(row["title"] for row in rows)


# ---------------------------------------------------------------------------
# Migrations
# ---------------------------------------------------------------------------


def test_feed_migrations_build_the_table(db):
    assert _columns(db, "articles") == ["id", "title", "content", "author"]


def test_ledger_records_applied_migrations(db):
    runner = MigrationRunner(db)
    assert runner.applied() == ["create_articles", "add_articles_author"]
    assert runner.is_applied("create_articles")
    assert not runner.is_applied("create_comments")


def test_second_run_applies_nothing(db):
    context = SchemaContext()
    results = MigrationRunner(db, context).run_directory(FEED_MIGRATIONS)

    assert [r.modified for r in results] == [False, False]
    assert MigrationRunner(db).applied() == ["create_articles", "add_articles_author"]
    assert context.get("articles").column_names == ["id", "title", "content", "author"]


def test_backward_run_reverts_everything(db):
    results = MigrationRunner(db).run_directory(FEED_MIGRATIONS, up=False)

    assert [r.name for r in results] == ["add_articles_author", "create_articles"]
    tables = [row["name"] for row in db.raw.execute("SELECT name FROM sqlite_master")]
    assert "articles" not in tables
    assert MigrationRunner(db).applied() == []


def test_revert_then_reapply(db):
    MigrationRunner(db).run_directory(FEED_MIGRATIONS, up=False)
    results = MigrationRunner(db).run_directory(FEED_MIGRATIONS)
    assert [r.modified for r in results] == [True, True]
    assert _columns(db, "articles") == ["id", "title", "content", "author"]


def test_ledger_table_exists(db):
    assert _columns(db, LEDGER_TABLE) == ["id", "name"]


class CreateNotes(Migration):
    def up(self, schema: SchemaEditor) -> None:
        schema.table("notes", lambda t: (t.add_primary("id"), t.add_string("legacy")))

    def down(self, schema: SchemaEditor) -> None:
        schema.drop_table("notes")


class ReshapeNotes(Migration):
    def up(self, schema: SchemaEditor) -> None:
        schema.table("notes", lambda t: (t.add_string("author"), t.drop_column("legacy")))

    def down(self, schema: SchemaEditor) -> None:
        schema.table("notes", lambda t: (t.add_string("legacy"), t.drop_column("author")))


class AddNotesTag(Migration):
    def up(self, schema: SchemaEditor) -> None:
        schema.table("notes", lambda t: t.add_string("tag"))

    def down(self, schema: SchemaEditor) -> None:
        schema.table("notes", lambda t: t.drop_column("tag"))


def test_add_and_drop_in_one_step(sqlite_db):
    runner = MigrationRunner(sqlite_db)
    results = runner.run([("create_notes", CreateNotes()), ("reshape_notes", ReshapeNotes())])

    assert [len(r.statements) for r in results] == [1, 2]
    assert _columns(sqlite_db, "notes") == ["id", "author"]
    assert runner.applied() == ["create_notes", "reshape_notes"]


def test_add_and_drop_reverts(sqlite_db):
    steps = [("create_notes", CreateNotes()), ("reshape_notes", ReshapeNotes())]
    MigrationRunner(sqlite_db).run(steps)

    results = MigrationRunner(sqlite_db).run(steps, up=False)

    assert [[s.sql for s in r.statements] for r in results] == [
        [
            'ALTER TABLE "notes" ADD COLUMN "legacy" VARCHAR(255);',
            'ALTER TABLE "notes" DROP COLUMN "author";',
        ],
        ['DROP TABLE IF EXISTS "notes";'],
    ]
    assert MigrationRunner(sqlite_db).applied() == []


def test_backward_run_with_a_pending_migration(sqlite_db):
    steps = [("create_notes", CreateNotes()), ("add_notes_tag", AddNotesTag())]
    MigrationRunner(sqlite_db).run(steps[:1])

    results = MigrationRunner(sqlite_db).run(steps, up=False)

    assert [(r.name, r.modified) for r in results] == [
        ("add_notes_tag", False),
        ("create_notes", True),
    ]
    tables = [row["name"] for row in sqlite_db.raw.execute("SELECT name FROM sqlite_master")]
    assert "notes" not in tables
    assert MigrationRunner(sqlite_db).applied() == []


def test_backward_preview_leaves_database(db):
    results = MigrationRunner(db).run_directory(FEED_MIGRATIONS, up=False, modify=False)

    assert [r.modified for r in results] == [False, False]
    assert [s.sql for s in results[1].statements] == ['DROP TABLE IF EXISTS "articles";']
    assert _columns(db, "articles") == ["id", "title", "content", "author"]
    assert MigrationRunner(db).applied() == ["create_articles", "add_articles_author"]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def test_insert_sets_last_insert_id(db):
    db.table("articles").insert({"title": "x"}).execute()
    assert db.last_insert_id == 1


def test_select_with_nested_group(feed):
    rows = (
        feed.table("articles")
        .select("title")
        .where("author", 1)
        .or_(lambda q: q.where("title", "b").and_("author", ">", 1))
        .execute()
    )
    assert _titles(rows) == ["a", "b"]


def test_select_with_tuple_group(feed):
    rows = feed.table("articles").select().where([("author", ">=", 2), ("title", "c")]).execute()
    assert _titles(rows) == ["c"]
    assert set(rows[0]) == {"id", "title", "content", "author"}


def test_select_limit(feed):
    assert len(feed.table("articles").select().limit(2).execute()) == 2


def test_update_binds_values_then_predicate(feed):
    feed.table("articles").where("author", 2).update({"title": "bb"}).execute()
    rows = feed.table("articles").select("title").where("author", 2).execute()
    assert rows == [{"title": "bb"}]


def test_delete(feed):
    feed.table("articles").delete("author", "<", 3).execute()
    assert _titles(feed.table("articles").select().execute()) == ["c"]


def test_quote_escapes_literals(db):
    assert db.quote("O'Brien") == "'O''Brien'"
    assert db.quote(None) == "NULL"


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


class Article(Model):
    __table__ = "articles"


@pytest.fixture()
def models(db, context, monkeypatch):
    monkeypatch.setattr(Article, "connection", db)
    monkeypatch.setattr(Article, "schema", context)
    return db


def test_model_insert_find_update_delete(models):
    article = Article(title="Hello", content="...", author=7).save()
    assert article.id == 1
    assert article.is_attached
    assert not article.is_dirty

    article.title = "Hello again"
    assert article.is_dirty
    article.save()

    found = Article.find(1)
    assert found.title == "Hello again"
    assert found.author == 7

    found.delete()
    assert Article.find(1) is None


def test_model_find_where(models):
    Article(title="a", author=1).save()
    Article(title="b", author=2).save()
    assert [a.title for a in Article.find_where("author", ">", 1)] == ["b"]


def test_model_rejects_undeclared_columns(models):
    with pytest.raises(AttributeError):
        Article(nope=1)


def test_model_without_connection_raises(monkeypatch):
    monkeypatch.setattr(Article, "connection", None)
    with pytest.raises(reefql.ExecutionError):
        Article.find(1)


# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------


def test_init_migrates_and_binds_models(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(Model, "connection", None)
    monkeypatch.setattr(Model, "schema", None)
    settings = reefql.Settings(
        type="sqlite",
        database=str(tmp_path / "feed.db"),
        migrations=FEED_MIGRATIONS,
    )

    connection = reefql.init(settings)
    try:
        assert Model.connection is connection
        assert "articles" in Model.schema
        assert _columns(connection, "articles") == ["id", "title", "content", "author"]
    finally:
        connection.close()
