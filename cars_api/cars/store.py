"""SQL for the cars table.

Query text is only ever assembled from fixed fragments; every value coming
from a request travels as a bound parameter. Column and direction names
cannot be bound, so they go through a whitelist first.
"""

from dataclasses import dataclass

from cars_api.db import get_connection

SORTABLE_COLUMNS = ("id", "brand", "model", "year", "price", "mileage")
SORT_ORDERS = ("ASC", "DESC")
DEFAULT_SORT_COLUMN = "year"
DEFAULT_SORT_ORDER = "DESC"

_CAR_COLUMNS = (
    "brand",
    "model",
    "year",
    "color",
    "price",
    "mileage",
    "description",
    "favorite",
    "category",
    "image_url",
)


def resolve_sort(sort_by: str | None, order: str | None) -> tuple[str, str]:
    """Unknown column or direction falls back to the default, never errors."""
    column = sort_by if sort_by in SORTABLE_COLUMNS else DEFAULT_SORT_COLUMN
    direction = (order or "").upper()
    if direction not in SORT_ORDERS:
        direction = DEFAULT_SORT_ORDER
    return column, direction


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass
class SearchFilters:
    brand: str | None = None
    model: str | None = None
    min_year: int | None = None
    max_year: int | None = None
    min_price: float | None = None
    max_price: float | None = None
    category: str | None = None


def build_search_query(filters: SearchFilters) -> tuple[str, list]:
    clauses = []
    params: list = []

    if filters.brand:
        clauses.append("brand LIKE ? ESCAPE '\\'")
        params.append(f"%{_escape_like(filters.brand)}%")
    if filters.model:
        clauses.append("model LIKE ? ESCAPE '\\'")
        params.append(f"%{_escape_like(filters.model)}%")
    if filters.min_year is not None:
        clauses.append("year >= ?")
        params.append(filters.min_year)
    if filters.max_year is not None:
        clauses.append("year <= ?")
        params.append(filters.max_year)
    if filters.min_price is not None:
        clauses.append("price >= ?")
        params.append(filters.min_price)
    if filters.max_price is not None:
        clauses.append("price <= ?")
        params.append(filters.max_price)
    if filters.category:
        clauses.append("category = ?")
        params.append(filters.category)

    sql = "SELECT * FROM cars"
    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += " ORDER BY year DESC"
    return sql, params


def row_to_car(row) -> dict:
    car = dict(row)
    car["favorite"] = bool(car.get("favorite"))
    return car


def list_cars(page: int, limit: int, sort_by: str | None, order: str | None) -> tuple[list[dict], str, str]:
    column, direction = resolve_sort(sort_by, order)
    offset = (page - 1) * limit
    with get_connection() as conn:
        rows = conn.execute(
            f"SELECT * FROM cars ORDER BY {column} {direction}, id ASC LIMIT ? OFFSET ?",
            (limit, offset),
        ).fetchall()
    return [row_to_car(r) for r in rows], column, direction


def search_cars(filters: SearchFilters) -> list[dict]:
    sql, params = build_search_query(filters)
    with get_connection() as conn:
        rows = conn.execute(sql, params).fetchall()
    return [row_to_car(r) for r in rows]


def favorite_cars() -> list[dict]:
    with get_connection() as conn:
        rows = conn.execute("SELECT * FROM cars WHERE favorite = 1 ORDER BY brand ASC").fetchall()
    return [row_to_car(r) for r in rows]


def get_car(car_id: int) -> dict | None:
    with get_connection() as conn:
        row = conn.execute("SELECT * FROM cars WHERE id = ?", (car_id,)).fetchone()
    return row_to_car(row) if row else None


def create_car(car: dict) -> dict:
    placeholders = ", ".join("?" for _ in _CAR_COLUMNS)
    with get_connection() as conn:
        cursor = conn.execute(
            f"INSERT INTO cars ({', '.join(_CAR_COLUMNS)}) VALUES ({placeholders})",
            [car.get(c) for c in _CAR_COLUMNS],
        )
        row = conn.execute("SELECT * FROM cars WHERE id = ?", (cursor.lastrowid,)).fetchone()
    return row_to_car(row)


def update_car(car_id: int, car: dict) -> dict | None:
    """Replace every mutable column. Returns None when no row has that id."""
    assignments = ", ".join(f"{c} = ?" for c in _CAR_COLUMNS)
    with get_connection() as conn:
        cursor = conn.execute(
            f"UPDATE cars SET {assignments} WHERE id = ?",
            [car.get(c) for c in _CAR_COLUMNS] + [car_id],
        )
        if cursor.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM cars WHERE id = ?", (car_id,)).fetchone()
    return row_to_car(row)


def delete_car(car_id: int) -> bool:
    with get_connection() as conn:
        cursor = conn.execute("DELETE FROM cars WHERE id = ?", (car_id,))
        return cursor.rowcount > 0


def set_image_url(car_id: int, image_url: str) -> bool:
    with get_connection() as conn:
        cursor = conn.execute("UPDATE cars SET image_url = ? WHERE id = ?", (image_url, car_id))
        return cursor.rowcount > 0
