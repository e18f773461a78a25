from __future__ import annotations

from sqlite3 import Connection
from typing import Any, Callable, Dict, List, Mapping, Tuple


def to_cents(v) -> int:
    """Major currency units -> stored minor units (cost_per_night is in cents)."""
    return int(round(float(v) * 100))


# option name -> (clause, SQL fragment, value transform)
# Applied in this order, only when the option value is truthy.
PROPERTY_FILTERS: Tuple[Tuple[str, str, str, Callable[[Any], Any]], ...] = (
    ("city", "where", "instr(properties.city, :city) > 0", str),
    ("owner_id", "where", "properties.owner_id = :owner_id", int),
    ("minimum_price_per_night", "where", "properties.cost_per_night >= :minimum_price_per_night", to_cents),
    ("maximum_price_per_night", "where", "properties.cost_per_night <= :maximum_price_per_night", to_cents),
    ("minimum_rating", "having", "AVG(property_reviews.rating) >= :minimum_rating", float),
)

# stored as INTEGER, coerced by attribute name
INTEGER_FIELDS = frozenset({"owner_id", "parking_spaces", "number_of_bathrooms", "number_of_bedrooms"})
# never taken from the input: id is assigned by the DB, active is always true on insert
IGNORED_FIELDS = frozenset({"id", "active"})


def to_int(attr: str, value) -> int:
    """Integer column value; floats with a fractional part are rejected, not truncated."""
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{attr} must be a whole number, got {value!r}")
    return int(value)


def build_property_filters(options: Mapping[str, Any] | None) -> Tuple[List[str], List[str], Dict[str, Any]]:
    """Turn listing options into WHERE fragments, HAVING fragments and named params.

    Unknown options are ignored. A value that cannot be converted raises ValueError.
    """
    where: List[str] = []
    having: List[str] = []
    params: Dict[str, Any] = {}
    options = options or {}
    for name, clause, fragment, transform in PROPERTY_FILTERS:
        value = options.get(name)
        if not value:
            continue
        params[name] = transform(value)
        (having if clause == "having" else where).append(fragment)
    return where, having, params


def list_properties(conn: Connection, options: Mapping[str, Any] | None, limit: int):
    where, having, params = build_property_filters(options)
    sql = (
        "SELECT properties.*, AVG(property_reviews.rating) AS average_rating "
        "FROM properties "
        "JOIN property_reviews ON properties.id = property_reviews.property_id"
    )
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " GROUP BY properties.id"
    if having:
        sql += " HAVING " + " AND ".join(having)
    sql += " ORDER BY properties.cost_per_night ASC, properties.id ASC LIMIT :limit"
    return conn.execute(sql, {**params, "limit": limit}).fetchall()


def property_columns(conn: Connection) -> set[str]:
    return {r["name"] for r in conn.execute("PRAGMA table_info(properties)").fetchall()}


def build_property_insert(prop: Mapping[str, Any], columns: set[str]) -> Tuple[str, List[Any]]:
    """INSERT for the truthy fields of `prop`, always with active = 1.

    Field names go into the SQL text, so each one must be a real column of the table.
    """
    names: List[str] = []
    values: List[Any] = []
    for attr, value in prop.items():
        if not value or attr in IGNORED_FIELDS:
            continue
        if attr not in columns:
            raise ValueError(f"unknown property field: {attr}")
        names.append(attr)
        values.append(to_int(attr, value) if attr in INTEGER_FIELDS else value)
    sql = "INSERT INTO properties({}) VALUES({})".format(
        ", ".join(names + ["active"]),
        ", ".join(["?"] * len(values) + ["1"]),
    )
    return sql, values


def insert_property(conn: Connection, prop: Mapping[str, Any]) -> int:
    sql, values = build_property_insert(prop, property_columns(conn))
    cur = conn.execute(sql, values)
    return int(cur.lastrowid)


def get_by_id(conn: Connection, property_id: int):
    return conn.execute("SELECT * FROM properties WHERE id = ?", (property_id,)).fetchone()
