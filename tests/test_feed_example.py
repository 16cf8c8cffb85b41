"""Smoke tests for the feed example CLI (examples/feed/runner.py)."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from examples.feed import runner
from reefql.model import Model

pytestmark = pytest.mark.skipif(
    sqlite3.sqlite_version_info < (3, 35),
    reason="ALTER TABLE ... DROP COLUMN needs SQLite 3.35+",
)


@pytest.fixture()
def feed_db(tmp_path: Path, monkeypatch) -> str:
    monkeypatch.setattr(Model, "connection", None)
    monkeypatch.setattr(Model, "schema", None)
    return str(tmp_path / "feed.db")


def test_submit_update_list_delete(feed_db, capsys):
    submit = ["--db", feed_db, "submit", "--title", "Hello", "--content", "First", "--author", "ada"]
    assert runner.main(submit) == 0
    assert runner.main(["--db", feed_db, "update", "1", "--title", "Hello again"]) == 0
    assert runner.main(["--db", feed_db, "list"]) == 0

    out = capsys.readouterr().out
    assert "Submitted article #1" in out
    assert "Hello again" in out
    assert "by ada" in out

    assert runner.main(["--db", feed_db, "delete", "1"]) == 0
    assert runner.main(["--db", feed_db, "delete", "1"]) == 1


def test_update_missing_article(feed_db):
    assert runner.main(["--db", feed_db, "update", "9", "--title", "x"]) == 1


def test_rollback_reverts_in_reverse_order(feed_db, capsys):
    runner.main(["--db", feed_db, "list"])
    assert runner.main(["--db", feed_db, "rollback"]) == 0

    out = capsys.readouterr().out
    assert out.index("Reverted add_articles_author") < out.index("Reverted create_articles")
    with sqlite3.connect(feed_db) as conn:
        tables = [row[0] for row in conn.execute("SELECT name FROM sqlite_master")]
    assert "articles" not in tables


def test_second_rollback_skips_pending_migrations(feed_db, capsys):
    runner.main(["--db", feed_db, "list"])
    runner.main(["--db", feed_db, "rollback"])
    capsys.readouterr()

    assert runner.main(["--db", feed_db, "rollback"]) == 0
    out = capsys.readouterr().out
    assert "Skipped add_articles_author (not applied)" in out
    assert "Reverted" not in out
