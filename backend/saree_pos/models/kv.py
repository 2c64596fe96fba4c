from __future__ import annotations

from ..extensions import db


class KeyValueEntry(db.Model):
    """
    One top-level value in the durable store.

    The whole inventory (or sales) collection lives in a single row as JSON and
    is rewritten in full on every mutation. Rows are scoped by namespace so
    tests and separate stalls can share one database file.
    """
    __tablename__ = "kv_store"
    __table_args__ = (
        db.UniqueConstraint("namespace", "key", name="uq_kv_store_namespace_key"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    namespace = db.Column(db.String(64), nullable=False, index=True)
    key = db.Column(db.String(128), nullable=False)
    value = db.Column(db.JSON, nullable=True)

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def __repr__(self) -> str:
        return f"<KeyValueEntry namespace={self.namespace!r} key={self.key!r}>"

