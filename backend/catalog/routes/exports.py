"""
Catalog export routes (CSV and JSON downloads).
"""

import json
from datetime import datetime

import pandas as pd
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ..services.catalog_service import CatalogService, get_catalog_service

router = APIRouter(prefix="/products/export", tags=["exports"])

CSV_COLUMNS = ['ID', 'External ID', 'Title', 'Price', 'Image URL', 'Description']


def export_filename(extension: str) -> str:
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    return f"products_{timestamp}.{extension}"


def attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/csv")
def export_csv(service: CatalogService = Depends(get_catalog_service)):
    """
    Download all products as CSV.

    Line breaks inside descriptions are flattened to spaces so each product
    stays on one line.
    """
    rows = [
        {
            'ID': product.id,
            'External ID': product.external_id,
            'Title': product.title,
            'Price': str(product.price),
            'Image URL': product.image_url or '',
            'Description': (product.description or '').replace('\r', ' ').replace('\n', ' '),
        }
        for product in service.get_all_products()
    ]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)

    return Response(
        content=df.to_csv(index=False),
        media_type="text/csv",
        headers=attachment(export_filename("csv")),
    )


@router.get("/json")
def export_json(service: CatalogService = Depends(get_catalog_service)):
    """Download all products as pretty-printed JSON."""
    products = service.get_all_products()
    export_data = {
        "exportedAt": datetime.now().isoformat(),
        "totalProducts": len(products),
        "products": [product.to_dict() for product in products],
    }

    return Response(
        content=json.dumps(export_data, indent=2),
        media_type="application/json",
        headers=attachment(export_filename("json")),
    )
