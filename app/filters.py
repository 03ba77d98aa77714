# app/filters.py
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .core import parse_int
from .models import Product


def _lenient_int(raw: Optional[str]) -> int:
    parsed = parse_int(raw)
    return parsed if parsed is not None else 0


@dataclass(frozen=True)
class ProductFilter:
    """Conjunctive product filter.

    A bound of 0 means the bound is unset, so ``min_price=0`` and
    ``max_price=0`` never exclude anything.
    """

    name_pattern: str = ""
    min_price: int = 0
    max_price: int = 0

    @classmethod
    def from_query(cls, nama: Optional[str] = None, min_harga: Optional[str] = None,
                   max_harga: Optional[str] = None) -> "ProductFilter":
        return cls(
            name_pattern=(nama or "").lower(),
            min_price=_lenient_int(min_harga),
            max_price=_lenient_int(max_harga),
        )

    def matches(self, p: Product) -> bool:
        if self.name_pattern and self.name_pattern.lower() not in p.name.lower():
            return False
        if self.min_price > 0 and p.price < self.min_price:
            return False
        if self.max_price > 0 and p.price > self.max_price:
            return False
        return True


def apply_filter(items: Iterable[Product], flt: Optional[ProductFilter] = None) -> List[Product]:
    if flt is None:
        return list(items)
    return [p for p in items if flt.matches(p)]
