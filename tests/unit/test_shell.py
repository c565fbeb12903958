"""Tests for the interactive shell."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from dynshell.commands import build_commands
from dynshell.exceptions import RemoteServiceError
from dynshell.models import CapacityFigures, MetricsSnapshot
from dynshell.pagination import ResumablePage
from dynshell.shell import NEXT_PAGE_HINT, DynShell, History, render


@pytest.fixture
def shell(client, bridge, cache, slot):
    client.list_tables.return_value = {"TableNames": ["orders-2024", "users"]}
    shell = DynShell(build_commands(client, bridge, cache, slot), slot)
    with shell.display_hook():
        yield shell


def _scan_pages(client) -> None:
    client.scan.side_effect = [
        {"Items": [{"id": 1}, {"id": 2}], "LastEvaluatedKey": {"id": 2}},
        {"Items": [{"id": 3}]},
    ]


class TestRender:
    """Tests for console formatting."""

    def test_page_renders_one_item_per_line(self) -> None:
        assert render(ResumablePage([{"id": 1}, {"id": 2}])) == "{'id': 1}\n{'id': 2}"

    def test_snapshot_renders_as_dict(self) -> None:
        snapshot = MetricsSnapshot("orders", 300_000, 3_600_000, CapacityFigures())
        assert "'period_ms': 300000" in render(snapshot)

    def test_plain_value(self) -> None:
        assert render({"TableName": "orders"}) == "{'TableName': 'orders'}"


class TestDisplay:
    """Tests for the display hook and the continuation slot."""

    def test_page_with_continuation_prints_hint(self, shell, slot, capsys) -> None:
        shell.display(ResumablePage([{"id": 1}], next=lambda: ResumablePage()))

        out = capsys.readouterr().out
        assert "{'id': 1}" in out
        assert NEXT_PAGE_HINT in out
        assert slot.has_next

    def test_terminal_page_has_no_hint(self, shell, slot, capsys) -> None:
        shell.display(ResumablePage([{"id": 1}]))

        assert NEXT_PAGE_HINT not in capsys.readouterr().out
        assert not slot.has_next

    def test_other_value_clears_slot(self, shell, slot) -> None:
        shell.display(ResumablePage([{"id": 1}], next=lambda: ResumablePage()))
        shell.display({"TableName": "orders"})

        assert not slot.has_next

    def test_none_prints_nothing(self, shell, capsys) -> None:
        shell.display(None)

        assert capsys.readouterr().out == ""


class TestSession:
    """Tests driving the shell one line at a time."""

    def test_scan_and_resume_with_it(self, shell, client, slot, capsys) -> None:
        _scan_pages(client)

        shell.push("t.orders_2024.scan()")
        first = capsys.readouterr().out
        shell.push("it")
        second = capsys.readouterr().out

        assert "{'id': 1}" in first and "{'id': 2}" in first
        assert NEXT_PAGE_HINT in first
        assert "{'id': 3}" in second
        assert NEXT_PAGE_HINT not in second
        assert not slot.has_next

    def test_it_on_terminal_page_is_noop(self, shell, client, capsys) -> None:
        _scan_pages(client)
        shell.push("t.orders_2024.scan()")
        shell.push("it")
        capsys.readouterr()

        shell.push("it")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
        assert client.scan.await_count == 2

    def test_it_without_any_page_is_noop(self, shell, capsys) -> None:
        shell.push("it")

        assert capsys.readouterr().out == ""

    def test_describe_after_scan_clears_it(self, shell, client, capsys) -> None:
        _scan_pages(client)
        client.describe_table.return_value = {"TableName": "orders-2024"}

        shell.push("t.orders_2024.scan()")
        shell.push("t['orders-2024'].describe()")
        capsys.readouterr()
        shell.push("it")

        assert capsys.readouterr().out == ""
        assert client.scan.await_count == 1

    def test_failed_resume_keeps_slot(self, shell, client, slot, capsys) -> None:
        client.scan.side_effect = [
            {"Items": [{"id": 1}], "LastEvaluatedKey": {"id": 1}},
            RemoteServiceError("Scan", "Rate exceeded", "ThrottlingException"),
            {"Items": [{"id": 2}]},
        ]
        shell.push("t.orders_2024.scan()")

        shell.push("it")
        assert "✗ Scan failed (ThrottlingException)" in capsys.readouterr().err
        assert slot.has_next

        shell.push("it")
        assert "{'id': 2}" in capsys.readouterr().out

    def test_failed_command_keeps_registry_cache(self, shell, client, cache, capsys) -> None:
        client.describe_table.side_effect = RemoteServiceError(
            "DescribeTable", "not found", "ResourceNotFoundException"
        )
        shell.push("t.users")
        registry = cache.get("tables")

        shell.push("t.users.describe()")

        assert "✗" in capsys.readouterr().err
        assert cache.get("tables") is registry
        assert client.list_tables.await_count == 1

    def test_assignment_then_resume(self, shell, client, capsys) -> None:
        _scan_pages(client)

        shell.push("page = t.orders_2024.scan()")
        shell.push("page.resume()")

        assert "{'id': 3}" in capsys.readouterr().out

    def test_name_bound_to_it_keeps_its_page(self, shell, client, capsys) -> None:
        _scan_pages(client)
        shell.push("t.orders_2024.scan()")

        shell.push("page = it")
        shell.push("n = len(page)")
        capsys.readouterr()
        shell.push("page")

        assert "{'id': 3}" in capsys.readouterr().out
        assert shell.locals["n"] == 1
        assert client.scan.await_count == 2

    def test_command_name_can_be_rebound(self, shell) -> None:
        shell.push("t = 5")

        assert shell.locals["t"] == 5

    def test_table_registry_display(self, shell, capsys) -> None:
        shell.push("t")

        out = capsys.readouterr().out
        assert "orders_2024" in out
        assert "orders-2024" not in out

    def test_table_aliases(self, shell) -> None:
        assert shell.locals["table"] is shell.locals["t"]
        assert shell.locals["tables"] is shell.locals["t"]

    def test_python_expressions_still_work(self, shell, capsys) -> None:
        shell.push("1 + 1")

        assert capsys.readouterr().out.strip() == "2"

    def test_plain_errors_show_traceback(self, shell, capsys) -> None:
        shell.push("t.no_such_table")

        assert "AttributeError" in capsys.readouterr().err

    def test_db_describe_limits(self, shell, client, capsys) -> None:
        client.describe_limits.return_value = {"TableMaxReadCapacityUnits": 40000}

        shell.push("db.describe_limits()")

        assert "40000" in capsys.readouterr().out


class TestDotCommands:
    """Tests for .name commands."""

    def test_help(self, shell, capsys) -> None:
        shell.push(".help")

        out = capsys.readouterr().out
        assert "it" in out
        assert "fetch the next page" in out
        assert "t, table, tables" in out

    def test_bare_help_runs_command(self, shell, capsys) -> None:
        shell.push("help")

        assert "display version" in capsys.readouterr().out

    def test_version(self, shell, capsys) -> None:
        from dynshell import __version__

        shell.push(".version")

        assert capsys.readouterr().out.strip() == __version__

    def test_unknown(self, shell, capsys) -> None:
        shell.push(".bogus")

        assert "Invalid command: .bogus" in capsys.readouterr().err

    def test_dot_it(self, shell, client, capsys) -> None:
        _scan_pages(client)
        shell.push("t.orders_2024.scan()")
        capsys.readouterr()

        shell.push(".it")

        assert "{'id': 3}" in capsys.readouterr().out

    def test_refresh_rediscovers(self, shell, client) -> None:
        shell.push("t")
        client.list_tables.return_value = {"TableNames": ["new-table"]}

        shell.push("refresh")

        assert "new_table" in shell.locals["t"]
        assert client.list_tables.await_count == 2

    def test_failed_refresh_keeps_registry(self, shell, client, cache, capsys) -> None:
        client.list_tables.side_effect = [
            {"TableNames": ["orders"]},
            RemoteServiceError("ListTables", "Rate exceeded", "ThrottlingException"),
        ]
        shell.push("t")
        registry = cache.get("tables")
        capsys.readouterr()

        shell.push("refresh")

        assert "✗ ListTables failed (ThrottlingException)" in capsys.readouterr().err
        assert cache.get("tables") is registry
        shell.push("t.orders")
        assert client.list_tables.await_count == 2

    def test_cache_stats(self, shell, capsys) -> None:
        shell.push("t")
        capsys.readouterr()

        shell.push(".cache")

        out = capsys.readouterr().out
        assert "'size': 1" in out
        assert "'misses': 1" in out


class TestHistory:
    """Tests for persisted history."""

    @pytest.fixture(autouse=True)
    def readline(self):
        readline = pytest.importorskip("readline")
        readline.clear_history()
        yield readline
        readline.clear_history()
        readline.set_auto_history(True)

    def test_records_lines(self, readline, tmp_path: Path) -> None:
        history = History(tmp_path / "history")

        history.record("t.orders.scan()")
        history.record("t.users.describe()")

        assert readline.get_current_history_length() == 2
        assert readline.get_history_item(2) == "t.users.describe()"

    def test_skips_blank_it_and_duplicates(self, readline, tmp_path: Path) -> None:
        history = History(tmp_path / "history")

        assert history.record("t.orders.scan()") is True
        assert history.record("t.orders.scan()") is False
        assert history.record("   ") is False
        assert history.record("it") is False
        assert history.record(".history") is False

        assert readline.get_current_history_length() == 1

    def test_save_then_load(self, readline, tmp_path: Path) -> None:
        path = tmp_path / "history"
        history = History(path)
        history.record("t.orders.scan()")
        history.record("t.users.describe()")
        history.save()
        readline.clear_history()

        History(path).load()

        assert readline.get_current_history_length() == 2
        assert readline.get_history_item(1) == "t.orders.scan()"

    def test_duplicate_of_loaded_last_line(self, readline, tmp_path: Path) -> None:
        path = tmp_path / "history"
        history = History(path)
        history.record("t.orders.scan()")
        history.save()
        readline.clear_history()

        history = History(path)
        history.load()

        assert history.record("t.orders.scan()") is False

    def test_missing_file_loads_nothing(self, readline, tmp_path: Path) -> None:
        History(tmp_path / "missing").load()

        assert readline.get_current_history_length() == 0

    def test_shell_records_lines(self, readline, client, bridge, cache, slot, tmp_path) -> None:
        history = History(tmp_path / "history")
        shell = DynShell(build_commands(client, bridge, cache, slot), slot, history)

        with shell.display_hook():
            shell.push("x = 1")
            shell.push("it")

        assert readline.get_current_history_length() == 1
        assert readline.get_history_item(1) == "x = 1"

    def test_interact_saves_on_exit(self, readline, client, bridge, cache, slot, tmp_path) -> None:
        path = tmp_path / "history"
        shell = DynShell(build_commands(client, bridge, cache, slot), slot, History(path))
        shell.raw_input = MagicMock(side_effect=["x = 1", EOFError()])

        shell.interact(banner="", exitmsg="")
        readline.clear_history()
        History(path).load()

        assert readline.get_history_item(1) == "x = 1"
