import uuid
from datetime import datetime, timezone
from pathlib import Path

IMAGE_EXTENSIONS = ['jpg', 'jpeg', 'png', 'webp']


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, the form DuckDB TIMESTAMP columns hold."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def build_update(fields: dict, columns: dict) -> tuple[list, list]:
    """Turn a partial-update dict into SET clauses and values.

    Args:
        fields: Model field name -> new value (None values are skipped)
        columns: Model field name -> database column name

    Returns:
        (set clauses, values) ready for an UPDATE statement
    """
    updates = []
    values = []
    for name, value in fields.items():
        if value is None or name not in columns:
            continue
        updates.append(f"{columns[name]} = ?")
        values.append(value)
    return updates, values


def cleanup_image_files(directory: Path, file_id: str):
    """Remove all image files for a given ID from a directory."""
    for ext in IMAGE_EXTENSIONS:
        (directory / f"{file_id}.{ext}").unlink(missing_ok=True)
