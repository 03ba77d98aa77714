import threading
from contextlib import contextmanager
from typing import Dict, Generic, Iterator, List, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel

from .exceptions import NotFoundError
from .filters import ProductFilter, apply_filter
from .models import Category, CategoryIn, Product, ProductIn

# This file holds the in-memory catalog collections and their locks.

logger = structlog.get_logger()

E = TypeVar("E", bound=BaseModel)


class ReadWriteLock:
    """Many readers or one writer.

    A waiting writer blocks new readers, so writes are not starved by a
    steady stream of list/get calls.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class EntityCollection(Generic[E]):
    """Insertion-ordered records of one entity type with their own id counter.

    Every method returns copies; callers never hold a reference into the
    collection once the lock is released.
    """

    def __init__(self, entity_type: str, model: Type[E]) -> None:
        self.entity_type = entity_type
        self.model = model
        self._items: List[E] = []
        self._last_id = 0
        self._lock = ReadWriteLock()

    def _index_of(self, entity_id: int) -> int:
        for i, item in enumerate(self._items):
            if item.id == entity_id:
                return i
        raise NotFoundError(self.entity_type, entity_id)

    def create(self, payload: BaseModel) -> E:
        with self._lock.write_locked():
            self._last_id += 1
            entity = self.model(id=self._last_id, **payload.model_dump())
            self._items.append(entity)
            out = entity.model_copy()
        logger.info(f"{self.entity_type} created", entity_id=out.id)
        return out

    def list(self, flt: Optional[ProductFilter] = None) -> List[E]:
        with self._lock.read_locked():
            return [item.model_copy() for item in apply_filter(self._items, flt)]

    def get(self, entity_id: int) -> E:
        with self._lock.read_locked():
            return self._items[self._index_of(entity_id)].model_copy()

    def update(self, entity_id: int, payload: BaseModel) -> E:
        with self._lock.write_locked():
            entity = self._items[self._index_of(entity_id)]
            for field, value in payload.model_dump().items():
                setattr(entity, field, value)
            out = entity.model_copy()
        logger.info(f"{self.entity_type} updated", entity_id=entity_id)
        return out

    def delete(self, entity_id: int) -> None:
        with self._lock.write_locked():
            del self._items[self._index_of(entity_id)]
        logger.info(f"{self.entity_type} deleted", entity_id=entity_id)

    def counts(self) -> Dict[str, int]:
        with self._lock.read_locked():
            return {"total": len(self._items), "last_id": self._last_id}


class CatalogStore:
    """Owns the product and category collections.

    The two collections are independent: nothing here ever holds both locks
    at the same time.
    """

    def __init__(self) -> None:
        self.products: EntityCollection[Product] = EntityCollection("Product", Product)
        self.categories: EntityCollection[Category] = EntityCollection("Category", Category)

    # Products
    def create_product(self, payload: ProductIn) -> Product:
        return self.products.create(payload)

    def list_products(self, flt: Optional[ProductFilter] = None) -> List[Product]:
        return self.products.list(flt)

    def get_product(self, product_id: int) -> Product:
        return self.products.get(product_id)

    def update_product(self, product_id: int, payload: ProductIn) -> Product:
        return self.products.update(product_id, payload)

    def delete_product(self, product_id: int) -> None:
        self.products.delete(product_id)

    # Categories
    def create_category(self, payload: CategoryIn) -> Category:
        return self.categories.create(payload)

    def list_categories(self) -> List[Category]:
        return self.categories.list()

    def get_category(self, category_id: int) -> Category:
        return self.categories.get(category_id)

    def update_category(self, category_id: int, payload: CategoryIn) -> Category:
        return self.categories.update(category_id, payload)

    def delete_category(self, category_id: int) -> None:
        self.categories.delete(category_id)

    def stats(self) -> Dict[str, int]:
        products = self.products.counts()
        categories = self.categories.counts()
        return {
            "total_products": products["total"],
            "total_categories": categories["total"],
            "last_product_id": products["last_id"],
            "last_category_id": categories["last_id"],
        }
