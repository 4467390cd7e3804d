"""Tests for shadowterms.cli: commands driven through CliRunner against a temp database."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from shadowterms import __version__
from shadowterms.cli.app import app

runner = CliRunner()


@pytest.fixture
def db(tmp_path) -> str:
    return str(tmp_path / "shadow.db")


def _json(db, *args):
    result = runner.invoke(app, [*args, "--database", db, "--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def _create(db, title, status="publish", post_type="example"):
    return _json(db, "posts", "create", post_type, "--title", title, "--status", status)


class TestRoot:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("db", "posts", "terms", "serve", "associate"):
            assert command in result.stdout


class TestDbCommands:
    def test_init(self, db):
        data = _json(db, "db", "init")
        assert data["tables_created"] == [
            "st_posts",
            "st_terms",
            "st_term_relationships",
            "st_post_attachments",
        ]

    def test_init_dry_run(self, db):
        assert _json(db, "db", "init", "--dry-run")["dry_run"] is True

    def test_init_table_output(self, db):
        result = runner.invoke(app, ["db", "init", "--database", db])
        assert result.exit_code == 0
        assert "tables_created" in result.stdout


class TestPostCommands:
    def test_create_published(self, db):
        post = _create(db, "Apple")
        assert post["slug"] == "apple"
        assert post["shadow_taxonomy"] == "example_connect"
        assert post["shadow_term_id"] > 0
        assert post["index_action"] == "create"

    def test_rename_keeps_term(self, db):
        post = _create(db, "Apple")
        renamed = _json(db, "posts", "update", str(post["id"]), "--title", "Apples")
        assert renamed["shadow_term_id"] == post["shadow_term_id"]
        assert renamed["index_action"] == "rename"

    def test_show(self, db):
        post = _create(db, "Apple", status="draft")
        shown = _json(db, "posts", "show", str(post["id"]))
        assert shown["title"] == "Apple"
        assert shown["shadow_term_id"] == 0

    def test_show_missing(self, db):
        result = runner.invoke(app, ["posts", "show", "999", "--database", db])
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.output

    def test_delete(self, db):
        post = _create(db, "Apple")
        deleted = _json(db, "posts", "delete", str(post["id"]))
        assert deleted["deleted"] is True
        assert deleted["index_action"] == "delete"

    def test_list(self, db):
        _create(db, "Apple")
        _create(db, "Zebra", status="draft")
        page = _json(db, "posts", "list", "--type", "example")
        assert page["total"] == 2
        assert [p["title"] for p in page["items"]] == ["Apple", "Zebra"]

    def test_list_table_output(self, db):
        _create(db, "Apple")
        result = runner.invoke(app, ["posts", "list", "--database", db])
        assert result.exit_code == 0
        assert "Apple" in result.stdout

    def test_registry_file(self, db, tmp_path):
        registry_file = tmp_path / "registry.yaml"
        registry_file.write_text("post_types:\n  book:\n    connected: [post]\n", encoding="utf-8")
        post = _json(
            db, "posts", "create", "book", "--title", "Dune", "--status", "publish", "--registry", str(registry_file)
        )
        assert post["shadow_taxonomy"] == "book_connect"
        assert post["shadow_term_id"] > 0

    def test_bad_registry_file(self, db, tmp_path):
        result = runner.invoke(
            app, ["posts", "list", "--database", db, "--registry", str(tmp_path / "missing.yaml")]
        )
        assert result.exit_code == 1
        assert "CONFIG_INVALID" in result.output


class TestAssociateCommand:
    def test_pending(self, db):
        source = _create(db, "Apple", status="draft")
        result = _json(db, "associate", str(source["id"]), "42")
        assert result["pending"] is True
        assert result["posts"] == [42]

    def test_live(self, db):
        source = _create(db, "Apple")
        target = _create(db, "Yellow", post_type="another-example")
        result = _json(db, "associate", str(source["id"]), str(target["id"]))
        assert result["posts"] == [target["id"]]
        assert result["term_id"] == source["shadow_term_id"]

    def test_not_participating(self, db):
        result = runner.invoke(app, ["associate", "abc", "1", "--database", db])
        assert result.exit_code == 1
        assert "NOT_PARTICIPATING" in result.output


class TestTermCommands:
    def test_list(self, db):
        post = _create(db, "Apple")
        page = _json(db, "terms", "list", "example_connect")
        assert page["total"] == 1
        assert page["items"][0]["post_id"] == post["id"]

    def test_list_unknown_category(self, db):
        result = runner.invoke(app, ["terms", "list", "nope", "--database", db])
        assert result.exit_code == 1

    def test_categories(self, db):
        data = _json(db, "terms", "categories")
        assert {c["slug"] for c in data} == {"example_connect", "another-example_connect"}

    def test_related(self, db):
        source = _create(db, "Apple")
        _json(db, "associate", str(source["id"]), "7")
        related = _json(db, "terms", "related", str(source["shadow_term_id"]))
        assert related["posts"] == [7]


class TestServeCommand:
    @patch("shadowterms.cli.serve.uvicorn.run")
    def test_start(self, mock_run):
        result = runner.invoke(app, ["serve", "start", "--port", "9001"])
        assert result.exit_code == 0
        args, kwargs = mock_run.call_args
        assert args == ("shadowterms.api:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["port"] == 9001
