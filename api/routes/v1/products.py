"""
api/routes/v1/products.py -- Product catalog routes.

Routes:
  POST   /products        -- create a product; 201
  GET    /products        -- list products (?page, ?limit, ?sort)
  GET    /products/{id}   -- product detail
  PUT    /products/{id}   -- replace name and price; created_at is kept
  DELETE /products/{id}   -- delete; 204

All routes require a Bearer token. Handlers are thin: they decode input,
call the ProductRepository, and let the app-level handler map core errors
(InvalidIdentifier/InvalidProduct -> 400, NotFound -> 404,
StorageError -> 500).

Query params on GET /products are read as raw strings. Non-numeric page or
limit values become 0, which the repository treats as "no pagination".
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from api.models import ProductInput, ProductResponse
from auth.dependencies import get_current_user
from catalog.models import Product
from catalog.store import ProductRepository
from core.identifier import parse_id

# Router-level dependency applies to every route registered on this router,
# so individual handlers don't each need to repeat Depends(get_current_user).
router = APIRouter(dependencies=[Depends(get_current_user)])


def _query_int(value: Optional[str]) -> int:
    """Parse a query parameter as an int, falling back to 0."""
    if value is None:
        return 0
    try:
        return int(value.strip())
    except ValueError:
        return 0


@router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(request: Request, body: ProductInput) -> ProductResponse:
    """Create a product. Name and price are validated by the Product constructor."""
    store: ProductRepository = request.app.state.product_store
    product = Product.new(body.name, body.price)
    store.create(product)
    return ProductResponse.from_product(product)


@router.get("/products", response_model=list[ProductResponse])
def list_products(
    request: Request,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort: Optional[str] = None,
) -> list[ProductResponse]:
    """List products ordered by creation time.

    sort is "asc" or "desc"; anything else is treated as "asc". page and
    limit are 1-indexed page number and page size; omit either (or pass 0)
    to receive every product.
    """
    store: ProductRepository = request.app.state.product_store
    products = store.find_all(_query_int(page), _query_int(limit), sort or "")
    return [ProductResponse.from_product(p) for p in products]


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(request: Request, product_id: str) -> ProductResponse:
    store: ProductRepository = request.app.state.product_store
    return ProductResponse.from_product(store.find_by_id(parse_id(product_id)))


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(request: Request, product_id: str, body: ProductInput) -> ProductResponse:
    """Replace a product's name and price.

    The stored created_at is carried over so list ordering is unaffected.
    """
    store: ProductRepository = request.app.state.product_store
    existing = store.find_by_id(parse_id(product_id))
    product = Product(
        id=existing.id,
        name=body.name,
        price=body.price,
        created_at=existing.created_at,
    )
    store.update(product)
    return ProductResponse.from_product(product)


@router.delete("/products/{product_id}", status_code=204)
def delete_product(request: Request, product_id: str) -> Response:
    store: ProductRepository = request.app.state.product_store
    store.delete(parse_id(product_id))
    return Response(status_code=204)
