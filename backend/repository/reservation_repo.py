from __future__ import annotations

from sqlite3 import Connection


def list_past_for_guest(conn: Connection, guest_id: int, today: str, limit: int):
    """Past reservations of a guest with the property's columns and the reservation's average rating.

    `id` is the property id; the reservation id comes back as `reservation_id`.
    Reservations without any review drop out because of the inner join.
    """
    return conn.execute(
        """
        SELECT properties.*,
               reservations.id AS reservation_id,
               reservations.guest_id,
               reservations.start_date,
               reservations.end_date,
               AVG(property_reviews.rating) AS average_rating
        FROM reservations
        JOIN properties ON reservations.property_id = properties.id
        JOIN property_reviews ON property_reviews.reservation_id = reservations.id
        WHERE reservations.guest_id = :guest_id AND reservations.end_date < :today
        GROUP BY reservations.id, properties.id
        ORDER BY reservations.start_date ASC, reservations.id ASC
        LIMIT :limit
        """,
        {"guest_id": guest_id, "today": today, "limit": limit},
    ).fetchall()
