"""Repository layer: SQL for users, properties and reservations (SQLite).

Functions take an open connection and return sqlite3.Row objects or new row ids;
connection handling and error translation live in the services.
"""
from __future__ import annotations
