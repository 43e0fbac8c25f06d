from __future__ import annotations

from fastapi import APIRouter, Depends

from ..config import settings
from ..core.deps import get_gateway
from ..reco.products import get_product_resolver
from ..schemas.products import SearchProductsRequest, SearchProductsResponse
from ..utils.ai_gateway import AIGatewayClient
from ..utils.profiler import reset_profiler

router = APIRouter(tags=["products"])


@router.post("/search-products", response_model=SearchProductsResponse, response_model_by_alias=True)
def search_products(req: SearchProductsRequest, gateway: AIGatewayClient = Depends(get_gateway)):
    """Purchase links for one clothing item, using the configured search strategy"""
    profiler = reset_profiler()
    resolver = get_product_resolver(settings.PRODUCT_SEARCH_STRATEGY, gateway)
    products = resolver.resolve(req.item)
    profiler.log_summary("[search-products] ")
    return SearchProductsResponse(products=products)
