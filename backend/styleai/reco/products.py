"""
Product resolution: turns one detected (or hand-picked) clothing item into
ranked purchase links.

Two strategies share one immutable Catalog (retailer registry, placeholder
images, query prefix) injected at construction:

- SearchLinkResolver builds one templated retailer search URL per store. It
  is deterministic and never invents prices or ratings. This is the default.
- GenerativeProductResolver asks the model for a handful of plausible
  listings. Their prices and ratings are synthetic and every candidate is
  flagged is_synthetic; links are still rebuilt from the registry.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Tuple
from urllib.parse import quote

from ..core.exceptions import MissingLabelError
from ..schemas.products import ProductCandidate, ProductQuery
from ..utils.ai_gateway import AIGatewayClient
from ..utils.json_extract import extract_json
from ..utils.sanitizer import sanitize

logger = logging.getLogger(__name__)

QUERY_FIELD_LIMITS = {"label": 100, "category": 50, "color": 30, "style": 50}


def _encode(query: str) -> str:
    return quote(query, safe="")


def _slug(query: str) -> str:
    return _encode(re.sub(r"\s+", "-", query.strip().lower()))


@dataclass(frozen=True)
class Retailer:
    name: str
    search_url: Callable[[str], str]
    logo: str = ""


@dataclass(frozen=True)
class Catalog:
    """Retailers to search and the category placeholder images to show."""
    retailers: Tuple[Retailer, ...]
    # (keywords, image url) pairs checked in order against the item category
    placeholder_images: Tuple[Tuple[Tuple[str, ...], str], ...]
    default_image: str
    query_prefix: str = ""
    _by_name: Mapping[str, Retailer] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self, "_by_name", MappingProxyType({r.name.lower(): r for r in self.retailers})
        )

    def retailer(self, name: Any) -> Optional[Retailer]:
        if not isinstance(name, str):
            return None
        return self._by_name.get(name.strip().lower())

    def image_for(self, category: str) -> str:
        category = (category or "").lower()
        for keywords, url in self.placeholder_images:
            if any(keyword in category for keyword in keywords):
                return url
        return self.default_image


DEFAULT_RETAILERS: Tuple[Retailer, ...] = (
    Retailer("Amazon", lambda q: f"https://www.amazon.com/s?k={_encode(q)}", "🛒"),
    Retailer("Flipkart", lambda q: f"https://www.flipkart.com/search?q={_encode(q)}", "🛍️"),
    Retailer("Myntra", lambda q: f"https://www.myntra.com/{_slug(q)}", "👗"),
    Retailer("ASOS", lambda q: f"https://www.asos.com/search/?q={_encode(q)}", "✨"),
    Retailer("H&M", lambda q: f"https://www2.hm.com/en_us/search-results.html?q={_encode(q)}", "🏷️"),
    Retailer("Zara", lambda q: f"https://www.zara.com/us/en/search?searchTerm={_encode(q)}", "🧥"),
    Retailer("Nordstrom", lambda q: f"https://www.nordstrom.com/sr?keyword={_encode(q)}", "💎"),
    Retailer("SHEIN", lambda q: f"https://us.shein.com/pdsearch/{_encode(q)}", "🌟"),
)

DEFAULT_PLACEHOLDER_IMAGES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("top", "shirt", "blouse"), "https://images.unsplash.com/photo-1596755094514-f87e34085b2c?w=300&h=400&fit=crop"),
    (("bottom", "pant", "jean", "trouser"), "https://images.unsplash.com/photo-1624378439575-d8705ad7ae80?w=300&h=400&fit=crop"),
    (("dress",), "https://images.unsplash.com/photo-1595777457583-95e059d581b8?w=300&h=400&fit=crop"),
    (("jacket", "coat", "outerwear"), "https://images.unsplash.com/photo-1591047139829-d91aecb6caea?w=300&h=400&fit=crop"),
    (("shoe", "footwear", "sneaker", "boot"), "https://images.unsplash.com/photo-1542291026-7eec264c27ff?w=300&h=400&fit=crop"),
)

DEFAULT_CATALOG = Catalog(
    retailers=DEFAULT_RETAILERS,
    placeholder_images=DEFAULT_PLACEHOLDER_IMAGES,
    default_image="https://images.unsplash.com/photo-1611923134239-b9be5816e23e?w=300&h=400&fit=crop",
)


@dataclass(frozen=True)
class SanitizedQuery:
    label: str
    category: str
    color: str
    style: str

    def search_terms(self, prefix: str = "") -> str:
        terms = [prefix, self.label, self.color, self.style]
        return " ".join(t for t in terms if t)


def sanitize_query(item: Optional[ProductQuery]) -> SanitizedQuery:
    """
    Strip control and markup characters from every item field before it is
    used in a URL or a prompt.

    Raises:
        MissingLabelError: if there is no usable label
    """
    if item is None:
        raise MissingLabelError()
    query = SanitizedQuery(
        label=sanitize(item.label, QUERY_FIELD_LIMITS["label"]),
        category=sanitize(item.category, QUERY_FIELD_LIMITS["category"]),
        color=sanitize(item.color, QUERY_FIELD_LIMITS["color"]),
        style=sanitize(item.style, QUERY_FIELD_LIMITS["style"]),
    )
    if not query.label:
        raise MissingLabelError()
    return query


class SearchLinkResolver:
    """One templated search link per registered retailer."""

    strategy = "deterministic"

    def __init__(self, catalog: Catalog = DEFAULT_CATALOG):
        self.catalog = catalog

    def resolve(self, item: Optional[ProductQuery]) -> List[ProductCandidate]:
        query = sanitize_query(item)
        terms = query.search_terms(self.catalog.query_prefix)
        image = self.catalog.image_for(query.category)
        products = [
            ProductCandidate(
                name=f"{query.label} on {retailer.name}",
                store=retailer.name,
                url=retailer.search_url(terms),
                image=image,
                logo=retailer.logo or None,
            )
            for retailer in self.catalog.retailers
        ]
        logger.info(f"Generated product links for {len(products)} stores")
        return products


GENERATIVE_PROMPT = """You are a shopping assistant for a fashion app. Given a clothing item, propose {count} plausible products a shopper could buy that match it.

Use only these stores: {stores}.

Respond with ONLY a JSON array, one object per product:
[
  {{"name": "product name", "store": "one of the stores", "price": 49.99, "originalPrice": 69.99, "rating": 4.3}}
]

"price" and "originalPrice" are numbers in USD, "rating" is between 0 and 5."""


def _money(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number) or number < 0:
        return None
    return round(number, 2)


def _rating(value: Any) -> Optional[float]:
    number = _money(value)
    if number is None:
        return None
    return min(number, 5.0)


class GenerativeProductResolver:
    """Model-proposed listings with illustrative (synthetic) price and rating."""

    strategy = "generative"

    def __init__(self, gateway: AIGatewayClient, catalog: Catalog = DEFAULT_CATALOG, count: int = 4):
        self.gateway = gateway
        self.catalog = catalog
        self.count = count

    def resolve(self, item: Optional[ProductQuery]) -> List[ProductCandidate]:
        query = sanitize_query(item)
        system = GENERATIVE_PROMPT.format(
            count=self.count,
            stores=", ".join(r.name for r in self.catalog.retailers),
        )
        user = (
            f"Item: {query.label}. Category: {query.category or 'unknown'}. "
            f"Color: {query.color or 'any'}. Style: {query.style or 'any'}."
        )
        text = self.gateway.complete(system, user, operation="product_generation")

        raw_products = extract_json(text, expect=list)
        if raw_products is None:
            logger.warning(f"Could not parse generated products: {(text or '')[:200]}")
            return []

        image = self.catalog.image_for(query.category)
        terms = query.search_terms(self.catalog.query_prefix)
        products = []
        for entry in raw_products:
            if not isinstance(entry, dict):
                continue
            retailer = self.catalog.retailer(entry.get("store"))
            name = sanitize(entry.get("name"), 120)
            if retailer is None or not name:
                continue
            products.append(
                ProductCandidate(
                    name=name,
                    store=retailer.name,
                    # Model-written URLs are never trusted
                    url=retailer.search_url(f"{name} {query.color}".strip()),
                    image=image,
                    logo=retailer.logo or None,
                    price=_money(entry.get("price")),
                    original_price=_money(entry.get("originalPrice")),
                    rating=_rating(entry.get("rating")),
                    is_synthetic=True,
                )
            )
            if len(products) >= self.count:
                break

        logger.info(f"Generated {len(products)} synthetic product suggestion(s) for '{terms}'")
        return products


def get_product_resolver(strategy: str, gateway: AIGatewayClient, catalog: Catalog = DEFAULT_CATALOG):
    """Build the configured resolver strategy"""
    if strategy == "generative":
        return GenerativeProductResolver(gateway, catalog)
    return SearchLinkResolver(catalog)
