"""reefQL feed example.

A tiny article feed kept in a SQLite file.  The migrations in
``examples/feed/migrations`` create the ``articles`` table and then add an
``author`` column; every command applies pending migrations first.

Usage
-----
List articles::

    python examples/feed/runner.py list

Submit an article::

    python examples/feed/runner.py submit --title "Hello" --content "First post"

Update or delete one::

    python examples/feed/runner.py update 1 --title "Hello again"
    python examples/feed/runner.py delete 1

Revert every migration (drops the table)::

    python examples/feed/runner.py rollback

Pass ``-v`` to log every SQL statement.
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

# ---------------------------------------------------------------------------
# Adjust sys.path so the package is importable when run as a script
# ---------------------------------------------------------------------------
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

import reefql
from reefql import DatabaseConnection, MigrationRunner, Model, Settings

MIGRATIONS = Path(__file__).parent / "migrations"
_DEFAULT_DB = Path(__file__).parent / "feed.db"

# ---------------------------------------------------------------------------
# ANSI colours
# ---------------------------------------------------------------------------
_RESET  = "\033[0m"
_GREEN  = "\033[32m"
_RED    = "\033[31m"
_YELLOW = "\033[33m"
_BOLD   = "\033[1m"


class Article(Model):
    __table__ = "articles"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_list(args: argparse.Namespace, conn: DatabaseConnection) -> int:
    rows = Article.query().select("id", "title", "content", "author").execute()
    if not rows:
        print(f"{_YELLOW}No articles yet.{_RESET}")
    for row in rows:
        byline = f" by {row['author']}" if row["author"] else ""
        print(f"{_BOLD}#{row['id']} {row['title']}{_RESET}{byline}")
        print(f"    {row['content']}")
    return 0


def cmd_submit(args: argparse.Namespace, conn: DatabaseConnection) -> int:
    article = Article(
        title=args.title or "Untitled Article",
        content=args.content or "This article has no content.",
        author=args.author,
    ).save()
    print(f"{_GREEN}Submitted article #{article.id}{_RESET}")
    return 0


def cmd_update(args: argparse.Namespace, conn: DatabaseConnection) -> int:
    article = Article.find(args.id)
    if article is None:
        print(f"{_RED}No article #{args.id}{_RESET}", file=sys.stderr)
        return 1
    changes = {
        name: value
        for name, value in (("title", args.title), ("content", args.content), ("author", args.author))
        if value is not None
    }
    article.assign(**changes)
    article.save()
    print(f"{_GREEN}Updated article #{args.id}{_RESET}")
    return 0


def cmd_delete(args: argparse.Namespace, conn: DatabaseConnection) -> int:
    article = Article.find(args.id)
    if article is None:
        print(f"{_RED}No article #{args.id}{_RESET}", file=sys.stderr)
        return 1
    article.delete()
    print(f"{_GREEN}Deleted article #{args.id}{_RESET}")
    return 0


def cmd_rollback(args: argparse.Namespace, conn: DatabaseConnection) -> int:
    results = MigrationRunner(conn).run_directory(MIGRATIONS, up=False)
    for result in results:
        if result.modified:
            print(f"{_YELLOW}Reverted {result.name}{_RESET}")
        else:
            print(f"Skipped {result.name} (not applied)")
    return 0


_COMMANDS: dict[str, Callable[[argparse.Namespace, DatabaseConnection], int]] = {
    "list": cmd_list,
    "submit": cmd_submit,
    "update": cmd_update,
    "delete": cmd_delete,
    "rollback": cmd_rollback,
}


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Manage a small article feed with reefQL and SQLite.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "--db", default=str(_DEFAULT_DB),
        help=f"SQLite database file (default: {_DEFAULT_DB.name} next to this script).",
    )
    p.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log every SQL statement.",
    )
    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="Print every article.")
    sub.add_parser("rollback", help="Revert every migration.")

    for name in ("submit", "update"):
        cmd = sub.add_parser(name, help=f"{name.capitalize()} an article.")
        if name == "update":
            cmd.add_argument("id", type=int)
        cmd.add_argument("--title")
        cmd.add_argument("--content")
        cmd.add_argument("--author")

    delete = sub.add_parser("delete", help="Delete an article.")
    delete.add_argument("id", type=int)
    return p.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = Settings(type="sqlite", database=args.db, migrations=MIGRATIONS)
    if args.command == "rollback":
        conn = reefql.connect(settings)
    else:
        conn = reefql.init(settings)
    try:
        return _COMMANDS[args.command](args, conn)
    finally:
        conn.close()


if __name__ == "__main__":
    sys.exit(main())
