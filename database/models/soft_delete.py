from sqlalchemy import Index, text

# Rows with deleted_at set are soft-deleted and ignored by every active lookup
ACTIVE_ROWS = text("deleted_at IS NULL")


def unique_while_active(name: str, *columns: str) -> Index:
    """Partial unique index: values only have to be unique among non-deleted rows."""
    return Index(
        name,
        *columns,
        unique=True,
        sqlite_where=ACTIVE_ROWS,
        postgresql_where=ACTIVE_ROWS,
    )
