# Overview: Row locking and compare-and-set helpers for workflow writes.

from __future__ import annotations


class VersionConflict(Exception):
    """Raised when a caller's expected cabin version no longer matches the row."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected version {expected}, found {actual}")


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def check_expected_version(row, expected_version: int | None) -> None:
    """
    Compare-and-set precondition for rows mapped with a version_id_col.

    None means the caller did not ask for the check; the ORM still guards the
    UPDATE itself with the version loaded in this transaction.
    """
    if expected_version is None:
        return
    if int(expected_version) != row.version_id:
        raise VersionConflict(int(expected_version), row.version_id)
