"""Response rendering.

Two renderers share one interface: ``JsonRenderer`` for API clients and
``FragmentRenderer`` for htmx-style partial page updates. Both work on
snapshots the caller has already taken; nothing here touches the store or
its locks.
"""

from html import escape
from typing import Dict, List, Sequence

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from .models import Category, Product, to_wire

NO_CATEGORY = "No Category"
NO_PRODUCTS = "<p class='text-muted'>No products found.</p>"
NO_CATEGORIES = "<p class='text-muted'>No categories found.</p>"


class Renderer:
    """Render product and category listings."""

    def products(self, products: Sequence[Product], categories: Sequence[Category]) -> Response:
        raise NotImplementedError

    def categories(self, categories: Sequence[Category]) -> Response:
        raise NotImplementedError

    @property
    def needs_categories(self) -> bool:
        """Whether product rendering reads category names."""
        return False


class JsonRenderer(Renderer):
    def products(self, products: Sequence[Product], categories: Sequence[Category] = ()) -> Response:
        return JSONResponse([to_wire(p) for p in products])

    def categories(self, categories: Sequence[Category]) -> Response:
        return JSONResponse([to_wire(c) for c in categories])


def _js_str(value: str) -> str:
    # single-quoted JS string literal inside an HTML attribute
    return escape(value.replace("\\", "\\\\").replace("'", "\\'"), quote=True)


def _table(headers: List[str], rows: List[str]) -> str:
    head = "".join(f"<th>{h}</th>" for h in headers)
    return (
        '<div class="table-responsive">'
        '<table class="table table-hover">'
        f"<thead><tr>{head}</tr></thead>"
        f"<tbody>{''.join(rows)}</tbody>"
        "</table></div>"
    )


def category_names(categories: Sequence[Category]) -> Dict[int, str]:
    names: Dict[int, str] = {}
    for c in categories:
        # first match wins, as in a linear scan
        names.setdefault(c.id, c.name)
    return names


def product_rows_html(products: Sequence[Product], categories: Sequence[Category]) -> str:
    if not products:
        return NO_PRODUCTS

    names = category_names(categories)
    rows = []
    for p in products:
        category_name = names.get(p.category_id, NO_CATEGORY)
        rows.append(
            "<tr>"
            f"<td>{p.id}</td>"
            f"<td>{escape(p.name)}</td>"
            f"<td>Rp {p.price}</td>"
            f"<td>{p.stock}</td>"
            f"<td>{escape(category_name)}</td>"
            "<td>"
            f'<button class="btn btn-sm btn-warning me-1" '
            f"onclick=\"editProduct({p.id}, '{_js_str(p.name)}', {p.price}, {p.stock}, {p.category_id})\">Edit</button>"
            f'<button class="btn btn-sm btn-danger" onclick="deleteProduct({p.id})">Delete</button>'
            "</td>"
            "</tr>"
        )
    return _table(["ID", "Name", "Price", "Stock", "Category", "Actions"], rows)


def category_rows_html(categories: Sequence[Category]) -> str:
    if not categories:
        return NO_CATEGORIES

    rows = []
    for c in categories:
        rows.append(
            "<tr>"
            f"<td>{c.id}</td>"
            f"<td>{escape(c.name)}</td>"
            f"<td>{escape(c.description)}</td>"
            "<td>"
            f'<button class="btn btn-sm btn-warning me-1" '
            f"onclick=\"editCategory({c.id}, '{_js_str(c.name)}', '{_js_str(c.description)}')\">Edit</button>"
            f'<button class="btn btn-sm btn-danger" onclick="deleteCategory({c.id})">Delete</button>'
            "</td>"
            "</tr>"
        )
    return _table(["ID", "Name", "Description", "Actions"], rows)


def category_options_html(categories: Sequence[Category]) -> str:
    return "".join(
        f'<option value="{c.id}">{escape(c.name)}</option>' for c in categories
    )


class FragmentRenderer(Renderer):
    def products(self, products: Sequence[Product], categories: Sequence[Category]) -> Response:
        return HTMLResponse(product_rows_html(products, categories))

    def categories(self, categories: Sequence[Category]) -> Response:
        return HTMLResponse(category_rows_html(categories))

    @property
    def needs_categories(self) -> bool:
        return True


def select_renderer(request: Request, header: str = "HX-Request") -> Renderer:
    if request.headers.get(header) == "true":
        return FragmentRenderer()
    return JsonRenderer()
