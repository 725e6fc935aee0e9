from __future__ import annotations

import uuid


def new_id() -> str:
    """Opaque primary key for every table (UUID4 as text)."""
    return str(uuid.uuid4())


def sql_in(column: str, values) -> str:
    """Render a CHECK constraint body restricting `column` to `values`."""
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"
