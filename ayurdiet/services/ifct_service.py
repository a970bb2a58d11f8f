"""
Read-only lookups in the IFCT 2017 nutrient table.

The table ships as a SQLite file (``IFCT_DB_PATH``) with one ``ifct`` row per
food: ``code``, ``name``, ``scie``, ``regn`` and one column per nutrient. Some
exports carry a byte-order mark on the first column name, so column names are
read from the table and normalised before use.
"""
import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from ayurdiet.core.config import settings
from ayurdiet.services.logger import get_logger

logger = get_logger(__name__)

TABLE = "ifct"
MAX_ENRICHED_FOODS = 10

# Nutrient summary keys -> candidate IFCT columns, first present wins
NUTRIENT_COLUMNS = {
    "energy": ("energy_kcal", "energy"),
    "protein": ("protein",),
    "fat": ("fat",),
    "carbohydrates": ("carbohydrates", "carbs"),
    "fiber": ("fiber",),
    "calcium": ("calcium",),
    "iron": ("iron",),
    "vitaminC": ("vitamin_c",),
}


class IFCTUnavailable(Exception):
    """The nutrient database file is not present."""


@contextmanager
def db_conn() -> Iterator[sqlite3.Connection]:
    path = settings.IFCT_DB_PATH
    if not os.path.exists(path):
        raise IFCTUnavailable(f"IFCT database not found at {path}")
    conn = sqlite3.connect(f"file:{path}?mode=ro", uri=True)
    try:
        yield conn
    finally:
        conn.close()


def _clean(name: str) -> str:
    return name.lstrip("\ufeff")


def _columns(conn: sqlite3.Connection) -> Dict[str, str]:
    """Normalised column name -> name as stored."""
    return {_clean(row[1]): row[1] for row in conn.execute(f'PRAGMA table_info("{TABLE}")')}


def _rows(cursor: sqlite3.Cursor) -> List[Dict[str, Any]]:
    names = [_clean(d[0]) for d in cursor.description]
    return [dict(zip(names, row)) for row in cursor.fetchall()]


def find_food(name: str) -> List[Dict[str, Any]]:
    """Foods whose name contains ``name``, case-insensitive."""
    with db_conn() as conn:
        cursor = conn.execute(f'SELECT * FROM "{TABLE}" WHERE LOWER("name") LIKE LOWER(?)', (f"%{name}%",))
        return _rows(cursor)


def find_by_nutrient(nutrient: str, minimum: float, maximum: float) -> List[Dict[str, Any]]:
    """Foods with ``minimum <= nutrient <= maximum``. Unknown nutrients raise ValueError."""
    with db_conn() as conn:
        column = _columns(conn).get(nutrient)
        if column is None or nutrient in ("code", "name", "scie"):
            raise ValueError(f"Unknown nutrient: {nutrient}")
        cursor = conn.execute(
            f'SELECT * FROM "{TABLE}" WHERE "{column}" BETWEEN ? AND ?', (minimum, maximum)
        )
        return _rows(cursor)


def find_by_code(code: str) -> Optional[Dict[str, Any]]:
    with db_conn() as conn:
        column = _columns(conn).get("code", "code")
        cursor = conn.execute(f'SELECT * FROM "{TABLE}" WHERE "{column}" = ? LIMIT 1', (code,))
        rows = _rows(cursor)
    return rows[0] if rows else None


def _nutrients(food: Dict[str, Any]) -> Dict[str, Any]:
    summary = {}
    for key, candidates in NUTRIENT_COLUMNS.items():
        summary[key] = next((food[c] for c in candidates if food.get(c)), 0)
    return summary


def nutrition_for(food_names: List[str]) -> List[Dict[str, Any]]:
    """First IFCT match per food name (at most ``MAX_ENRICHED_FOODS`` names)."""
    data = []
    for food_name in food_names[:MAX_ENRICHED_FOODS]:
        matches = find_food(food_name)
        if not matches:
            continue
        food = matches[0]
        data.append({"name": food.get("name"), "code": food.get("code"), "nutrients": _nutrients(food)})
    return data
