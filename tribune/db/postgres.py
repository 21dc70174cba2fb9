"""Postgres-backed document store."""

from typing import Any, Callable, Dict, List, Optional, Sequence

from psycopg import sql
from psycopg.types.json import Jsonb

from .connection import close_connection_pool, get_connection
from .store import OPERATORS, Document, DocumentNotFoundError, DocumentStore, Filter, to_stored_value


class PostgresStore(DocumentStore):
    """Store documents as JSONB rows in the ``documents`` table."""

    def __init__(self, db_config: Dict[str, Any]) -> None:
        self.db_config = db_config

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT doc FROM documents WHERE collection = %s AND id = %s",
                    (collection, doc_id),
                )
                row = cur.fetchone()
        return row["doc"] if row else None

    def insert_if_absent(self, collection: str, doc_id: str, doc: Document) -> bool:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO documents (collection, id, doc)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (collection, id) DO NOTHING
                    RETURNING id
                    """,
                    (collection, doc_id, Jsonb(doc)),
                )
                inserted = cur.fetchone() is not None
            conn.commit()
        return inserted

    def update(self, collection: str, doc_id: str, partial: Document) -> None:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET doc = doc || %s
                    WHERE collection = %s AND id = %s
                    """,
                    (Jsonb(partial), collection, doc_id),
                )
                if cur.rowcount == 0:
                    conn.rollback()
                    raise DocumentNotFoundError(f"{collection}/{doc_id}")
            conn.commit()

    def transform(
        self,
        collection: str,
        doc_id: str,
        fn: Callable[[Document], Document],
    ) -> Optional[Document]:
        with get_connection(self.db_config) as conn:
            with conn.transaction():
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        SELECT doc FROM documents
                        WHERE collection = %s AND id = %s
                        FOR UPDATE
                        """,
                        (collection, doc_id),
                    )
                    row = cur.fetchone()
                    if row is None:
                        return None

                    partial = fn(row["doc"])
                    cur.execute(
                        """
                        UPDATE documents
                        SET doc = doc || %s
                        WHERE collection = %s AND id = %s
                        RETURNING doc
                        """,
                        (Jsonb(partial), collection, doc_id),
                    )
                    return cur.fetchone()["doc"]

    def _predicate(self, flt: Filter) -> sql.Composable:
        if flt.op not in OPERATORS:
            raise ValueError(f"Unsupported operator: {flt.op}")

        field = sql.Literal(flt.field)
        op = sql.SQL(flt.op)
        value = to_stored_value(flt.value)

        if value is None:
            check = "IS NULL" if flt.op == "==" else "IS NOT NULL"
            return sql.SQL("(doc->>{}) " + check).format(field)
        if isinstance(value, str):
            # Byte order keeps fixed-width timestamps in time order
            return sql.SQL('(doc->>{}) COLLATE "C" {} {}').format(
                field, op, sql.Literal(value)
            )
        return sql.SQL("(doc->{}) {} {}").format(field, op, sql.Literal(Jsonb(value)))

    def query(
        self,
        collection: str,
        where: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        clauses = [sql.SQL("collection = {}").format(sql.Literal(collection))]
        clauses.extend(self._predicate(flt) for flt in where)

        query = sql.SQL("SELECT doc FROM documents WHERE {}").format(
            sql.SQL(" AND ").join(clauses)
        )
        if order_by:
            query += sql.SQL(" ORDER BY (doc->{}) {} NULLS LAST").format(
                sql.Literal(order_by),
                sql.SQL("DESC" if descending else "ASC"),
            )
        if limit is not None:
            query += sql.SQL(" LIMIT {}").format(sql.Literal(limit))

        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(query)
                return [row["doc"] for row in cur.fetchall()]

    def delete(self, collection: str, doc_id: str) -> bool:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM documents WHERE collection = %s AND id = %s",
                    (collection, doc_id),
                )
                deleted = cur.rowcount > 0
            conn.commit()
        return deleted

    def close(self) -> None:
        close_connection_pool()
