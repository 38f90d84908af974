import duckdb
import logging
from pathlib import Path

from ..config import DESIGNS_DB, CATALOG_DB

logger = logging.getLogger(__name__)

_designs_conn = None
_catalog_conn = None


def _safe_connect(db_path):
    """Connect to DuckDB, cleaning up corrupted WAL file if needed."""
    try:
        return duckdb.connect(str(db_path))
    except duckdb.InternalException as e:
        if "WAL file" in str(e):
            wal_path = Path(str(db_path) + ".wal")
            if wal_path.exists():
                logger.warning(f"Removing corrupted WAL file: {wal_path}")
                wal_path.unlink()
                return duckdb.connect(str(db_path))
        raise


def init_databases(designs_path=None, catalog_path=None):
    """Open both databases and create tables. Pass ':memory:' for throwaway stores."""
    global _designs_conn, _catalog_conn

    # Rooms and designs
    _designs_conn = _safe_connect(designs_path or DESIGNS_DB)
    _designs_conn.execute("""
        CREATE TABLE IF NOT EXISTS rooms (
            id VARCHAR PRIMARY KEY,
            name VARCHAR NOT NULL,
            width DOUBLE NOT NULL,
            length DOUBLE NOT NULL,
            height DOUBLE NOT NULL,
            wall_color VARCHAR NOT NULL,
            floor_color VARCHAR NOT NULL,
            user_id VARCHAR NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    _designs_conn.execute("CREATE INDEX IF NOT EXISTS idx_rooms_user_id ON rooms(user_id)")

    _designs_conn.execute("""
        CREATE TABLE IF NOT EXISTS designs (
            id VARCHAR PRIMARY KEY,
            name VARCHAR NOT NULL,
            room_id VARCHAR NOT NULL,
            user_id VARCHAR NOT NULL,
            furniture JSON,
            room_details JSON,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    _designs_conn.execute("CREATE INDEX IF NOT EXISTS idx_designs_user_id ON designs(user_id)")

    # Furniture catalog
    _catalog_conn = _safe_connect(catalog_path or CATALOG_DB)
    _catalog_conn.execute("""
        CREATE TABLE IF NOT EXISTS products (
            id VARCHAR PRIMARY KEY,
            name VARCHAR NOT NULL,
            category VARCHAR NOT NULL,
            width DOUBLE NOT NULL,
            length DOUBLE NOT NULL,
            height DOUBLE NOT NULL,
            color VARCHAR,
            default_color VARCHAR NOT NULL,
            model_format VARCHAR DEFAULT 'box',
            model_url VARCHAR,
            thumbnail_url VARCHAR,
            obj_model_path VARCHAR,
            glb_model_path VARCHAR,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    _catalog_conn.execute("CREATE INDEX IF NOT EXISTS idx_products_category ON products(category)")


def get_designs_db():
    return _designs_conn

def get_catalog_db():
    return _catalog_conn

def close_databases():
    global _designs_conn, _catalog_conn
    if _designs_conn:
        _designs_conn.close()
    if _catalog_conn:
        _catalog_conn.close()
    _designs_conn = None
    _catalog_conn = None
