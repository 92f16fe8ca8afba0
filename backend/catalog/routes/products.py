"""
Product page and fragment routes.

Handlers return HTML fragments for htmx swaps; forms post url-encoded data.
"""

import time
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from .. import views
from ..models import Product
from ..services.catalog_service import CatalogService, get_catalog_service

router = APIRouter(tags=["products"])


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Treat blank form input as absent."""
    if value is None or not value.strip():
        return None
    return value


def require_title(title: str) -> str:
    """Stripped title; a blank title is rejected like a missing field."""
    title = title.strip()
    if not title:
        raise HTTPException(status_code=422, detail="Title must not be blank")
    return title


def products_table(service: CatalogService) -> HTMLResponse:
    return HTMLResponse(views.render_products_table(service.get_all_products()))


@router.get("/", response_class=HTMLResponse)
def index():
    return views.render_index_page()


@router.get("/search", response_class=HTMLResponse)
def search_page():
    return views.render_search_page()


@router.get("/products/search", response_class=HTMLResponse)
def search_products(query: str = "", service: CatalogService = Depends(get_catalog_service)):
    """
    Search results fragment.

    A blank query lists the whole catalog.
    """
    if not query.strip():
        products = service.get_all_products()
    else:
        products = service.search_products(query.strip())
    return views.render_search_results(products, query)


@router.get("/products/load", response_class=HTMLResponse)
def load_products(service: CatalogService = Depends(get_catalog_service)):
    return products_table(service)


@router.post("/products/add", response_class=HTMLResponse)
def add_product(
    title: str = Form(...),
    price: Decimal = Form(...),
    image_url: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    service: CatalogService = Depends(get_catalog_service),
):
    """Create a manually entered product and return the refreshed table."""
    title = require_title(title)
    product = Product(
        external_id=int(time.time() * 1000),  # manual entries have no source id
        title=title,
        price=price,
        image_url=blank_to_none(image_url),
        description=blank_to_none(description),
    )
    service.save_product(product)
    return products_table(service)


@router.get("/products/{product_id}/edit", response_class=HTMLResponse)
def edit_product(product_id: int, service: CatalogService = Depends(get_catalog_service)):
    product = service.get_product_by_id(product_id)
    if product is None:
        return HTMLResponse(views.render_not_found(product_id), status_code=404)
    return views.render_edit_form(product)


@router.get("/products/{product_id}/edit-page", response_class=HTMLResponse)
def edit_product_page(product_id: int, service: CatalogService = Depends(get_catalog_service)):
    product = service.get_product_by_id(product_id)
    if product is None:
        return RedirectResponse("/", status_code=303)
    return views.render_edit_page(product)


@router.api_route("/products/{product_id}", methods=["PUT", "POST"], response_class=HTMLResponse)
def update_product(
    request: Request,
    product_id: int,
    title: str = Form(...),
    price: Decimal = Form(...),
    image_url: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Update a product from the edit form.

    Unknown ids are ignored. htmx requests get the refreshed table; plain form
    posts from the edit page are redirected back to the index.
    """
    title = require_title(title)
    existing = service.get_product_by_id(product_id)
    if existing is not None:
        existing.title = title
        existing.price = price
        existing.image_url = blank_to_none(image_url)
        existing.description = blank_to_none(description)
        service.update_product(existing)

    if request.headers.get("HX-Request") is None and request.method == "POST":
        return RedirectResponse("/", status_code=303)
    return products_table(service)


@router.delete("/products/{product_id}", response_class=HTMLResponse)
def delete_product(product_id: int, service: CatalogService = Depends(get_catalog_service)):
    service.delete_product(product_id)
    return products_table(service)
