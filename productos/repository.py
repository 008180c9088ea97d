import logging
import threading
from typing import Any, Callable, List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from .errors import NotFoundError, QueryError
from .models import Base, products
from .schemas import ProductIn, ProductOut

logger = logging.getLogger(__name__)


class ProductRepository:
    """Single-table data access over one shared connection.

    Every operation runs exactly one statement and commits it. Statements
    from concurrent requests take turns on the connection.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._conn: Optional[Connection] = None
        self._lock = threading.Lock()

    def open(self) -> None:
        """Connect and create the table if it does not exist yet."""
        self._conn = self.engine.connect()
        Base.metadata.create_all(bind=self._conn)
        self._conn.commit()
        logger.info("Database connection established")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self.engine.dispose()
        logger.info("Database connection closed")

    def _run(self, operation: str, statement, collect: Callable[[CursorResult], Any]):
        # collect() reads rows/rowcount before the commit releases the cursor
        if self._conn is None:
            raise QueryError("Database connection is not open", operation)
        with self._lock:
            try:
                result = self._conn.execute(statement)
                value = collect(result)
                self._conn.commit()
            except SQLAlchemyError as e:
                self._conn.rollback()
                detail = str(getattr(e, "orig", None) or e)
                logger.error(f"{operation} failed: {detail}", extra={"error_code": "QUERY_ERROR"})
                raise QueryError(detail, operation) from e
        return value

    def create(self, product: ProductIn) -> ProductOut:
        data = product.model_dump()
        new_id = self._run(
            "create",
            insert(products).values(**data),
            lambda r: r.inserted_primary_key[0],
        )
        created = ProductOut(id=new_id, **data)
        logger.info(f"Product created: {created.name}", extra={"product_id": new_id})
        return created

    def get_all(self, name: Optional[str] = None) -> List[ProductOut]:
        statement = select(products).order_by(products.c.id)
        if name:
            # Bound LIKE pattern; % and _ in the filter match literally
            statement = statement.where(products.c.name.contains(name, autoescape=True))
        rows = self._run("get_all", statement, lambda r: r.all())
        return [ProductOut.model_validate(row) for row in rows]

    def find_by_id(self, product_id: int) -> ProductOut:
        row = self._run(
            "find_by_id",
            select(products).where(products.c.id == product_id),
            lambda r: r.first(),
        )
        if row is None:
            raise NotFoundError(product_id)
        return ProductOut.model_validate(row)

    def update_by_id(self, product_id: int, product: ProductIn) -> ProductOut:
        data = product.model_dump()
        affected = self._run(
            "update_by_id",
            update(products).where(products.c.id == product_id).values(**data),
            lambda r: r.rowcount,
        )
        if affected == 0:
            raise NotFoundError(product_id)
        logger.info("Product updated", extra={"product_id": product_id})
        return ProductOut(id=product_id, **data)

    def remove(self, product_id: int) -> None:
        affected = self._run(
            "remove",
            delete(products).where(products.c.id == product_id),
            lambda r: r.rowcount,
        )
        if affected == 0:
            raise NotFoundError(product_id)
        logger.info("Product deleted", extra={"product_id": product_id})

    def remove_all(self) -> int:
        deleted = self._run("remove_all", delete(products), lambda r: r.rowcount)
        logger.info(f"{deleted} products were deleted")
        return deleted
