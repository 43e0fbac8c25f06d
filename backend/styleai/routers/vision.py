from __future__ import annotations

from fastapi import APIRouter, Depends

from ..core.deps import get_gateway
from ..reco.detector import ClothingDetector
from ..schemas.profile import AnalyzeProfileImageRequest, AnalyzeProfileImageResponse
from ..schemas.vision import DetectClothingRequest, DetectClothingResponse
from ..utils.ai_gateway import AIGatewayClient
from ..utils.image_analyzer import ProfileImageAnalyzer
from ..utils.profiler import reset_profiler

router = APIRouter(tags=["vision"])


@router.post("/analyze-profile-image", response_model=AnalyzeProfileImageResponse)
def analyze_profile_image(req: AnalyzeProfileImageRequest, gateway: AIGatewayClient = Depends(get_gateway)):
    """Infer gender, body type and colouring from a profile photo (base64 data URL)"""
    profiler = reset_profiler()
    analysis = ProfileImageAnalyzer(gateway).analyze(req.image_base64)
    profiler.log_summary("[analyze-profile-image] ")
    return AnalyzeProfileImageResponse(analysis=analysis)


@router.post("/detect-clothing", response_model=DetectClothingResponse)
def detect_clothing(req: DetectClothingRequest, gateway: AIGatewayClient = Depends(get_gateway)):
    """
    Detect clothing items and their hotspot positions in a photo.

    Accepts a base64 data URL or an HTTPS image URL. An empty list means
    nothing usable was found.
    """
    profiler = reset_profiler()
    items = ClothingDetector(gateway).detect(req.image)
    profiler.log_summary("[detect-clothing] ")
    return DetectClothingResponse(items=items)
