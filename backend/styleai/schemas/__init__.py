"""
Pydantic schemas for the StyleAI API.

Import all schemas here for easy access.
"""
from .common import HealthResponse
from .profile import (
    Gender,
    StyleProfileInput,
    ProfileAnalysis,
    ProfileUpdate,
    ProfileResponse,
    AnalyzeProfileImageRequest,
    AnalyzeProfileImageResponse,
    ProfileAnalyzeResult,
)
from .wardrobe import (
    WardrobeCategory,
    WardrobeEntryInput,
    WardrobeItemBase,
    WardrobeItem,
    WardrobeItemCreate,
    WardrobeItemUpdate,
    WardrobeStats,
)
from .outfit import (
    OutfitPieces,
    OutfitAlternatives,
    OutfitSuggestion,
    SuggestOutfitRequest,
    MySuggestRequest,
    SuggestOutfitResponse,
    SavedOutfitCreate,
    SavedOutfitResponse,
)
from .vision import DetectedItem, DetectClothingRequest, DetectClothingResponse
from .products import ProductQuery, ProductCandidate, SearchProductsRequest, SearchProductsResponse

__all__ = [
    # Common
    "HealthResponse",
    # Profile
    "Gender",
    "StyleProfileInput",
    "ProfileAnalysis",
    "ProfileUpdate",
    "ProfileResponse",
    "AnalyzeProfileImageRequest",
    "AnalyzeProfileImageResponse",
    "ProfileAnalyzeResult",
    # Wardrobe
    "WardrobeCategory",
    "WardrobeEntryInput",
    "WardrobeItemBase",
    "WardrobeItem",
    "WardrobeItemCreate",
    "WardrobeItemUpdate",
    "WardrobeStats",
    # Outfit
    "OutfitPieces",
    "OutfitAlternatives",
    "OutfitSuggestion",
    "SuggestOutfitRequest",
    "MySuggestRequest",
    "SuggestOutfitResponse",
    "SavedOutfitCreate",
    "SavedOutfitResponse",
    # Vision
    "DetectedItem",
    "DetectClothingRequest",
    "DetectClothingResponse",
    # Products
    "ProductQuery",
    "ProductCandidate",
    "SearchProductsRequest",
    "SearchProductsResponse",
]
