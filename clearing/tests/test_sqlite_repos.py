"""Tests for SQLite clearing repositories and node transactions."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

import pytest

from clearing.core.domain.enums import DecisionKind
from clearing.core.domain.errors import StoreWriteFailure
from clearing.core.domain.models import TreeItem
from clearing.infra.sqlite.db import get_connection
from clearing.infra.sqlite.migrator import apply_migrations
from clearing.infra.sqlite.node_transaction import SqliteNodeTransaction
from clearing.infra.sqlite.repos.clearing_decision_repo import ClearingDecisionRepo
from clearing.infra.sqlite.repos.clearing_history_repo import ClearingHistoryRepo
from clearing.infra.sqlite.repos.copyright_repo import CopyrightRepo
from clearing.infra.sqlite.repos.upload_tree_reader import UploadTreeReader
from clearing.infra.sqlite.repos.upload_tree_writer import UploadTreeWriter, compute_nested_bounds

T1 = datetime(2025, 1, 10, 9, 30, tzinfo=timezone.utc)
T2 = datetime(2025, 1, 11, 9, 30, tzinfo=timezone.utc)


def _connect() -> sqlite3.Connection:
    conn = get_connection(":memory:")
    apply_migrations(conn)
    writer = UploadTreeWriter(conn)
    writer.insert_tree(
        [
            (1, None, "upload.tar", True),
            (2, 1, "src", True),
            (3, 2, "main.c", False),
            (4, 2, "util.c", False),
            (5, 1, "README", False),
        ]
    )
    writer.add_license(3, "MIT")
    writer.add_copyright(30, 3, "(c) 2021 Dana")
    writer.add_copyright(31, 3, "(c) 2022 Eve", active=False)
    return conn


def test_compute_nested_bounds() -> None:
    bounds = compute_nested_bounds(
        [
            (1, None, "root", True),
            (2, 1, "a", False),
            (3, 1, "b", True),
            (4, 3, "c", False),
        ]
    )
    assert bounds == {1: (1, 8), 2: (2, 3), 3: (4, 7), 4: (5, 6)}


def test_compute_nested_bounds_rejects_orphans() -> None:
    with pytest.raises(ValueError):
        compute_nested_bounds([(1, None, "root", True), (2, 99, "orphan", False)])


def test_migrations_are_idempotent() -> None:
    conn = _connect()
    assert apply_migrations(conn) == ["001_clearing_schema.sql"]
    count = conn.execute("SELECT COUNT(*) FROM uploadtree").fetchone()[0]
    assert count == 5


def test_upload_tree_reader() -> None:
    conn = _connect()
    reader = UploadTreeReader(conn)

    assert reader.get_item(2) == TreeItem(item_id=2, parent_id=1, name="src", is_container=True)
    assert reader.get_item(99) is None
    assert [item.item_id for item in reader.list_subtree(1)] == [1, 2, 3, 4, 5]
    assert [item.item_id for item in reader.list_subtree(2)] == [2, 3, 4]
    assert list(reader.list_subtree(99)) == []
    assert reader.has_detected_license(3) is True
    assert reader.has_detected_license(4) is False


def test_copyright_repo() -> None:
    conn = _connect()
    repo = CopyrightRepo(conn)

    findings = repo.findings_for(3)
    assert [(f.finding_id, f.active) for f in findings] == [(30, True), (31, False)]
    repo.set_active(30, False)
    assert repo.is_active(30) is False
    assert repo.is_active(999) is None
    with pytest.raises(LookupError):
        repo.set_active(999, False)


def test_copyright_rows_cannot_be_deleted() -> None:
    conn = _connect()
    with pytest.raises(sqlite3.DatabaseError):
        conn.execute("DELETE FROM copyright WHERE copyright_id = 30")


def test_decision_repo_upserts_single_row() -> None:
    conn = _connect()
    repo = ClearingDecisionRepo(conn)

    assert repo.get_current_decision(3) is None
    repo.set_current_decision(3, DecisionKind.IDENTIFIED, T1)
    repo.set_current_decision(3, DecisionKind.IRRELEVANT, T2)

    decision = repo.get_current_decision(3)
    assert decision.kind == DecisionKind.IRRELEVANT
    assert decision.updated_at == T2
    row = conn.execute(
        "SELECT COUNT(*), MAX(decision_type_id) FROM clearing_decision WHERE item_id = 3"
    ).fetchone()
    assert tuple(row) == (1, 4)


def test_history_repo_is_append_only() -> None:
    conn = _connect()
    repo = ClearingHistoryRepo(conn)

    repo.append(2, DecisionKind.DO_NOT_USE, T1)
    repo.append(2, DecisionKind.DO_NOT_USE, T2)

    entries = repo.entries_for(2)
    assert [(e.kind, e.timestamp) for e in entries] == [
        (DecisionKind.DO_NOT_USE, T1),
        (DecisionKind.DO_NOT_USE, T2),
    ]
    with pytest.raises(sqlite3.DatabaseError):
        conn.execute("UPDATE clearing_history SET decision_type = 'IDENTIFIED'")
    with pytest.raises(sqlite3.DatabaseError):
        conn.execute("DELETE FROM clearing_history")
    assert len(repo.entries_for(2)) == 2


def test_node_transaction_commits() -> None:
    conn = _connect()
    guard = SqliteNodeTransaction(conn)
    history = ClearingHistoryRepo(conn)

    with guard.guard(5):
        history.append(5, DecisionKind.IRRELEVANT, T1)

    assert not conn.in_transaction
    assert len(history.entries_for(5)) == 1


def test_node_transaction_rolls_back_only_failed_node() -> None:
    conn = _connect()
    guard = SqliteNodeTransaction(conn)
    decisions = ClearingDecisionRepo(conn)

    with guard.guard(4):
        decisions.set_current_decision(4, DecisionKind.IDENTIFIED, T1)
    with pytest.raises(RuntimeError):
        with guard.guard(5):
            decisions.set_current_decision(5, DecisionKind.IDENTIFIED, T1)
            raise RuntimeError("boom")

    assert decisions.get_current_decision(4) is not None
    assert decisions.get_current_decision(5) is None
    assert not conn.in_transaction


def test_node_transaction_begin_failure_is_store_write_failure() -> None:
    conn = _connect()
    conn.execute("BEGIN")
    try:
        with pytest.raises(StoreWriteFailure) as exc_info:
            with SqliteNodeTransaction(conn).guard(3):
                pass
        assert exc_info.value.operation == "begin"
        assert exc_info.value.item_id == 3
    finally:
        conn.rollback()
