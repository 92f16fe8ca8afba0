"""
HTML rendering for pages and htmx fragments.

Fragments are swapped into the page by htmx; full pages include the htmx
script and the shared stylesheet.
"""

from html import escape
from typing import List, Optional

from .models import Product


HTMX_SRC = "https://unpkg.com/htmx.org@1.9.12"

STYLE = """
body { font-family: system-ui, sans-serif; margin: 2rem; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #ddd; padding: 0.4rem; text-align: left; vertical-align: top; }
img.thumb { max-width: 64px; max-height: 64px; }
form.inline { display: inline; }
.muted { color: #777; }
"""


def _text(value: Optional[object]) -> str:
    return escape(str(value)) if value is not None else ""


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{escape(title)}</title>
  <script src="{HTMX_SRC}"></script>
  <style>{STYLE}</style>
</head>
<body>
  <nav><a href="/">Products</a> | <a href="/search">Search</a> |
    <a href="/products/export/csv">Export CSV</a> |
    <a href="/products/export/json">Export JSON</a></nav>
  {body}
</body>
</html>"""


def _product_fields(product: Optional[Product] = None) -> str:
    title = _text(product.title) if product else ""
    price = _text(product.price) if product else ""
    image_url = _text(product.image_url) if product else ""
    description = _text(product.description) if product else ""
    return f"""
    <label>Title <input name="title" value="{title}" required></label>
    <label>Price <input name="price" type="number" step="0.01" min="0" value="{price}" required></label>
    <label>Image URL <input name="image_url" value="{image_url}"></label>
    <label>Description <textarea name="description">{description}</textarea></label>"""


def _product_rows(products: List[Product]) -> str:
    rows = []
    for product in products:
        image = (f'<img class="thumb" src="{_text(product.image_url)}" alt="">'
                 if product.image_url else "")
        rows.append(f"""
      <tr id="product-{product.id}">
        <td>{image}</td>
        <td>{_text(product.title)}</td>
        <td>{_text(product.price)}</td>
        <td>{_text(product.description)}</td>
        <td>
          <button hx-get="/products/{product.id}/edit" hx-target="#edit-area">Edit</button>
          <a href="/products/{product.id}/edit-page">Open</a>
          <button hx-delete="/products/{product.id}" hx-target="#products-table"
                  hx-swap="outerHTML" hx-confirm="Delete {_text(product.title)}?">Delete</button>
        </td>
      </tr>""")
    return "".join(rows)


def render_products_table(products: List[Product]) -> str:
    """Fragment: the products table (id="products-table")."""
    if not products:
        return '<div id="products-table"><p class="muted">No products yet.</p></div>'
    return f"""<div id="products-table">
  <table>
    <thead><tr><th>Image</th><th>Title</th><th>Price</th><th>Description</th><th></th></tr></thead>
    <tbody>{_product_rows(products)}
    </tbody>
  </table>
  <p class="muted">{len(products)} products</p>
</div>"""


def render_search_results(products: List[Product], query: str) -> str:
    """Fragment: search results for query."""
    if not products:
        return f'<div id="search-results"><p class="muted">No products match "{_text(query)}".</p></div>'
    return f"""<div id="search-results">
  <p class="muted">{len(products)} results for "{_text(query)}"</p>
  <table>
    <thead><tr><th>Image</th><th>Title</th><th>Price</th><th>Description</th><th></th></tr></thead>
    <tbody>{_product_rows(products)}
    </tbody>
  </table>
</div>"""


def render_edit_form(product: Product) -> str:
    """Fragment: inline edit form that PUTs back and refreshes the table."""
    return f"""<form id="edit-form" hx-put="/products/{product.id}" hx-target="#products-table"
      hx-swap="outerHTML">
  <h3>Edit {_text(product.title)}</h3>{_product_fields(product)}
  <button type="submit">Save</button>
</form>"""


def render_not_found(product_id: int) -> str:
    return f'<p class="muted">Product {product_id} not found.</p>'


def render_index_page() -> str:
    body = f"""
  <h1>Products</h1>
  <form hx-post="/products/add" hx-target="#products-table" hx-swap="outerHTML">
    <h3>Add product</h3>{_product_fields()}
    <button type="submit">Add</button>
  </form>
  <div id="edit-area"></div>
  <div id="products-table" hx-get="/products/load" hx-trigger="load" hx-swap="outerHTML">
    <p class="muted">Loading...</p>
  </div>"""
    return _page("Products", body)


def render_search_page() -> str:
    body = """
  <h1>Search products</h1>
  <input type="search" name="query" placeholder="Search by title"
         hx-get="/products/search" hx-trigger="keyup changed delay:300ms, search, load"
         hx-target="#search-results" hx-swap="outerHTML">
  <div id="edit-area"></div>
  <div id="products-table"></div>
  <div id="search-results"></div>"""
    return _page("Search products", body)


def render_edit_page(product: Product) -> str:
    body = f"""
  <h1>Edit product</h1>
  <p class="muted">External ID {_text(product.external_id)}</p>
  <form method="post" action="/products/{product.id}">{_product_fields(product)}
    <button type="submit">Save</button>
  </form>"""
    return _page(f"Edit {product.title}", body)
