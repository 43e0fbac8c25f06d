"""
Product search schemas.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductQuery(BaseModel):
    """A detected or manually selected item to shop for (untrusted)"""
    model_config = ConfigDict(extra="ignore")

    label: Any = None
    category: Any = None
    color: Any = None
    style: Any = None


class ProductCandidate(BaseModel):
    """A purchase link for an item.

    Prices and ratings are only ever present on generated candidates, which
    are flagged with isSynthetic: they are illustrative, not live retail data.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str
    store: str
    url: str
    image: str
    logo: Optional[str] = None
    price: Optional[float] = None
    original_price: Optional[float] = Field(None, alias="originalPrice")
    rating: Optional[float] = None
    is_synthetic: bool = Field(False, alias="isSynthetic")


class SearchProductsRequest(BaseModel):
    item: Optional[ProductQuery] = None


class SearchProductsResponse(BaseModel):
    products: List[ProductCandidate]
