# app/main.py
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, settings as default_settings
from .core import decode_body, parse_int
from .database import CatalogStore
from .exceptions import BadRequestError, CatalogError
from .filters import ProductFilter
from .logs import RequestIdMiddleware, configure_logging
from .models import CategoryIn, ProductIn, to_wire
from .render import category_options_html, select_renderer

logger = structlog.get_logger()

# ---------------------------
# Dependencies
# ---------------------------
def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def read_body(request: Request) -> bytes:
    # endpoints are sync (thread pool); the body is read here on the event loop
    return await request.body()


def parse_id(raw: str) -> int:
    value = parse_int(raw)
    if value is None:
        raise BadRequestError("invalid id", details={"id": raw})
    return value


def _error_body(request: Request, error_code: str, message: str, details=None) -> dict:
    return {
        "error_code": error_code,
        "message": message,
        "details": details or {},
        "request_id": getattr(request.state, "request_id", None),
    }


# ---------------------------
# Product endpoints
# ---------------------------
catalog = APIRouter()


@catalog.post("/produk", status_code=201)
def create_product(request: Request, body: bytes = Depends(read_body),
                   store: CatalogStore = Depends(get_store)):
    payload = decode_body(body, request.headers.get("content-type", ""), ProductIn)
    product = store.create_product(payload)
    return JSONResponse(to_wire(product), status_code=201)


@catalog.get("/produk")
def list_products(request: Request,
                  nama: Optional[str] = None,
                  min_harga: Optional[str] = Query(None, alias="minHarga"),
                  max_harga: Optional[str] = Query(None, alias="maxHarga"),
                  store: CatalogStore = Depends(get_store),
                  cfg: Settings = Depends(get_settings)):
    flt = ProductFilter.from_query(nama, min_harga, max_harga)
    renderer = select_renderer(request, cfg.fragment_header)

    # one collection lock at a time: products snapshot, then categories
    products = store.list_products(flt)
    categories = store.list_categories() if renderer.needs_categories else []
    return renderer.products(products, categories)


@catalog.get("/produk/{product_id}")
def get_product(product_id: str, store: CatalogStore = Depends(get_store)):
    return JSONResponse(to_wire(store.get_product(parse_id(product_id))))


@catalog.put("/produk/{product_id}")
def update_product(product_id: str, request: Request, body: bytes = Depends(read_body),
                   store: CatalogStore = Depends(get_store)):
    pid = parse_id(product_id)
    payload = decode_body(body, request.headers.get("content-type", ""), ProductIn)
    return JSONResponse(to_wire(store.update_product(pid, payload)))


@catalog.delete("/produk/{product_id}", status_code=204)
def delete_product(product_id: str, store: CatalogStore = Depends(get_store)):
    store.delete_product(parse_id(product_id))
    return Response(status_code=204)


@catalog.api_route("/produk/", methods=["GET", "PUT", "DELETE"], include_in_schema=False)
def product_without_id():
    raise BadRequestError("invalid id", details={"id": ""})


# ---------------------------
# Category endpoints
# ---------------------------
@catalog.post("/categories", status_code=201)
def create_category(request: Request, body: bytes = Depends(read_body),
                    store: CatalogStore = Depends(get_store)):
    payload = decode_body(body, request.headers.get("content-type", ""), CategoryIn)
    category = store.create_category(payload)
    return JSONResponse(to_wire(category), status_code=201)


@catalog.get("/categories")
def list_categories(request: Request, store: CatalogStore = Depends(get_store),
                    cfg: Settings = Depends(get_settings)):
    renderer = select_renderer(request, cfg.fragment_header)
    return renderer.categories(store.list_categories())


@catalog.get("/categories/{category_id}")
def get_category(category_id: str, store: CatalogStore = Depends(get_store)):
    return JSONResponse(to_wire(store.get_category(parse_id(category_id))))


@catalog.put("/categories/{category_id}")
def update_category(category_id: str, request: Request, body: bytes = Depends(read_body),
                    store: CatalogStore = Depends(get_store)):
    cid = parse_id(category_id)
    payload = decode_body(body, request.headers.get("content-type", ""), CategoryIn)
    return JSONResponse(to_wire(store.update_category(cid, payload)))


@catalog.delete("/categories/{category_id}", status_code=204)
def delete_category(category_id: str, store: CatalogStore = Depends(get_store)):
    store.delete_category(parse_id(category_id))
    return Response(status_code=204)


@catalog.api_route("/categories/", methods=["GET", "PUT", "DELETE"], include_in_schema=False)
def category_without_id():
    raise BadRequestError("invalid id", details={"id": ""})


# ---------------------------
# Dashboard helpers
# ---------------------------
helpers = APIRouter()


@helpers.get("/api/stats")
def stats(store: CatalogStore = Depends(get_store)):
    return store.stats()


@helpers.get("/api/category-options", response_class=HTMLResponse)
def category_options(store: CatalogStore = Depends(get_store)):
    return HTMLResponse(category_options_html(store.list_categories()))


@helpers.get("/health")
def health(cfg: Settings = Depends(get_settings)):
    return {"status": "healthy", "service": cfg.service_name, "version": cfg.api_version}


# ---------------------------
# Application factory
# ---------------------------
def create_app(store: Optional[CatalogStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    cfg = settings or default_settings
    configure_logging(cfg.log_level, cfg.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Starting Kasir API", version=cfg.api_version, debug=cfg.debug)
        yield
        logger.info("Shutting down Kasir API")

    app = FastAPI(title="Kasir API", description="Cashier product and category catalog",
                  version=cfg.api_version, lifespan=lifespan, redirect_slashes=False)
    app.state.store = store if store is not None else CatalogStore()
    app.state.settings = cfg

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.include_router(catalog)
    app.include_router(catalog, prefix="/api", include_in_schema=False)
    app.include_router(helpers)

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        logger.info("Request rejected", error_code=exc.error_code, message=exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.error_code, exc.message, exc.details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        codes = {404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED"}
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, codes.get(exc.status_code, "ERROR"), str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception in handler", path=request.url.path,
                         method=request.method, error=str(exc))
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "INTERNAL_ERROR", "An internal error occurred"),
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=default_settings.host, port=default_settings.port)
