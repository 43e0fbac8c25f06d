from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from pydantic import ValidationError

from ..core.exceptions import StyleAIException
from ..schemas.outfit import OutfitSuggestion
from ..schemas.profile import StyleProfileInput
from ..schemas.wardrobe import WardrobeEntryInput
from ..utils.ai_gateway import AIGatewayClient
from ..utils.json_extract import extract_json
from ..utils.sanitizer import sanitize
from .normalizer import GENDER_NOUNS, GENDER_WEAR, NormalizedContext, normalize

logger = logging.getLogger(__name__)

DEFAULT_OCCASION = "casual everyday"
MAX_OCCASION_LENGTH = 50

_OUTPUT_SCHEMA = """{{
  "outfit": {{
    "top": "specific description with color and style",
    "bottom": "specific description with color and style",
    "outerwear": "description or null if not needed",
    "shoes": "specific description with color and style",
    "accessories": "description or null"
  }},
  "explanation": "Brief friendly explanation of why this outfit works",
  "styling_tips": ["tip 1", "tip 2", "tip 3"],
  "color_harmony": "explanation of color coordination",
  "alternatives": {{"top": "an alternative top", "bottom": "an alternative bottom"}},
  "image_prompt": "A detailed fashion photography prompt describing the complete outfit for a {noun}"
}}"""


FALLBACK_OUTFITS = {
    "male": {
        "outfit": {
            "top": "Classic white button-down shirt",
            "bottom": "Navy blue chinos",
            "outerwear": None,
            "shoes": "Brown leather loafers",
            "accessories": "Simple leather watch",
        },
        "alternatives": {"top": "Light blue oxford shirt", "bottom": "Charcoal wool trousers"},
    },
    "female": {
        "outfit": {
            "top": "Elegant white blouse",
            "bottom": "High-waisted navy trousers",
            "outerwear": None,
            "shoes": "Nude pointed-toe heels",
            "accessories": "Gold pendant necklace",
        },
        "alternatives": {"top": "Cream silk camisole", "bottom": "Navy midi skirt"},
    },
    "unspecified": {
        "outfit": {
            "top": "Crisp white crew-neck t-shirt",
            "bottom": "Dark indigo straight-leg jeans",
            "outerwear": "Navy unstructured overshirt",
            "shoes": "Clean white leather sneakers",
            "accessories": None,
        },
        "alternatives": {"top": "Grey merino sweater", "bottom": "Black relaxed chinos"},
    },
}

FALLBACK_EXPLANATION = "A timeless combination that works for most occasions."
FALLBACK_TIPS = ["Keep accessories minimal", "Ensure proper fit", "Iron clothes for a crisp look"]
FALLBACK_COLOR_HARMONY = "Navy and white is a classic pairing that suits most skin tones."


def fallback_suggestion(gender: str) -> OutfitSuggestion:
    """Deterministic, gender-appropriate suggestion used when model output is unusable."""
    variant = FALLBACK_OUTFITS.get(gender, FALLBACK_OUTFITS["unspecified"])
    return OutfitSuggestion(
        outfit=variant["outfit"],
        explanation=FALLBACK_EXPLANATION,
        styling_tips=list(FALLBACK_TIPS),
        color_harmony=FALLBACK_COLOR_HARMONY,
        alternatives=variant["alternatives"],
        outfit_image=None,
    )


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing model output: a suggestion or a failure reason."""
    suggestion: Optional[OutfitSuggestion] = None
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.suggestion is not None


def parse_suggestion(text: Optional[str]) -> ParseResult:
    """
    Two-stage parse of the model's text: locate a JSON object, then validate
    it against the OutfitSuggestion contract.

    Pure function; never raises.
    """
    candidate = extract_json(text, expect=dict)
    if candidate is None:
        return ParseResult(failure="no JSON object in model output")

    # The model never decides the image; drop anything it put there
    candidate.pop("outfit_image", None)
    try:
        return ParseResult(suggestion=OutfitSuggestion.model_validate(candidate))
    except ValidationError as e:
        return ParseResult(failure=f"schema validation failed: {e.error_count()} error(s)")


def resolve_occasion(occasion: Optional[str]) -> str:
    return sanitize(occasion, MAX_OCCASION_LENGTH) or DEFAULT_OCCASION


def build_system_prompt(context: NormalizedContext) -> str:
    noun = GENDER_NOUNS[context.gender]
    return f"""You are StyleAI, an expert fashion stylist AI. Your role is to suggest perfect outfit combinations based on the user's profile, wardrobe, and occasion.

CRITICAL INSTRUCTION - GENDER-APPROPRIATE OUTFITS:
{context.gender_context}

Always respond with a JSON object in this exact format:
{_OUTPUT_SCHEMA.format(noun=noun)}

"top", "bottom" and "shoes" are required. Use null for "outerwear" or "accessories" when not needed.
Include at least one styling tip.

IMPORTANT: Do not suggest clothing categories that are inappropriate for the user's gender."""


def build_user_prompt(occasion: str, context: NormalizedContext) -> str:
    policy = (
        "Prioritize items from my wardrobe when possible."
        if context.has_wardrobe
        else "Suggest items I should consider purchasing."
    )
    return f"""Please suggest an outfit for: {occasion}

USER PROFILE: {context.profile_description}
WARDROBE: {context.wardrobe_description}

{policy}

Remember: Suggest {GENDER_WEAR[context.gender]} clothing items only."""


class OutfitEngine:
    """Profile + wardrobe + occasion in, one structured outfit suggestion out."""

    def __init__(self, gateway: AIGatewayClient):
        self.gateway = gateway

    def recommend(
        self,
        profile: Optional[StyleProfileInput],
        wardrobe: Optional[Iterable[WardrobeEntryInput]],
        occasion: Optional[str],
    ) -> OutfitSuggestion:
        """
        Generate an outfit suggestion.

        Always returns a schema-valid suggestion: unusable model output is
        replaced by the fallback for the user's gender.

        Raises:
            RateLimitedError, QuotaExhaustedError, UpstreamUnavailableError,
            MisconfiguredError: classified upstream failures
        """
        context = normalize(profile, wardrobe)
        resolved_occasion = resolve_occasion(occasion)
        logger.info(
            f"Suggesting outfit: gender={context.gender}, occasion='{resolved_occasion}', "
            f"wardrobe={'yes' if context.has_wardrobe else 'empty'}"
        )

        try:
            text = self.gateway.complete(
                build_system_prompt(context),
                build_user_prompt(resolved_occasion, context),
                operation="outfit_suggestion",
            )
        except StyleAIException:
            raise
        except Exception as e:
            logger.error(f"Unexpected error calling the AI gateway, using fallback: {e}", exc_info=True)
            return fallback_suggestion(context.gender)

        result = parse_suggestion(text)
        if not result.ok:
            logger.warning(f"Model output unusable ({result.failure}); using {context.gender} fallback")
            return fallback_suggestion(context.gender)
        return result.suggestion
