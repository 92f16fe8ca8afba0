"""
Data models.

Product is the persisted record. The Remote* pydantic models decode the
external catalog payload; fields the catalog adds later are ignored.
"""

from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator


@dataclass
class Product:
    """A catalog product as stored in the products table."""
    external_id: int
    title: str
    price: Decimal
    id: Optional[int] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    variants: Optional[str] = None  # JSON text of the source variant list

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation used by the export endpoint."""
        data = asdict(self)
        data['price'] = str(self.price)  # exact decimal text
        return data


# =============================================================================
# Remote catalog payload
# =============================================================================

class RemoteVariant(BaseModel):
    """Variant record from the remote catalog."""
    id: int
    title: str = ""
    price: Optional[str] = None
    available: bool = False

    @field_validator('price', mode='before')
    @classmethod
    def _price_as_text(cls, value):
        # Some catalogs send the price as a JSON number
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class RemoteImage(BaseModel):
    """Image record from the remote catalog."""
    id: int
    src: str
    alt: Optional[str] = None


class RemoteProduct(BaseModel):
    """Product record from the remote catalog."""
    id: int
    title: str
    body_html: Optional[str] = None
    variants: List[RemoteVariant] = []
    images: List[RemoteImage] = []


class RemoteCatalog(BaseModel):
    """Top-level payload: {"products": [...]}."""
    products: List[RemoteProduct] = []
