"""
Turns the caller's profile and wardrobe into bounded, sanitized prompt text.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..schemas.profile import StyleProfileInput
from ..schemas.wardrobe import WardrobeEntryInput
from ..utils.sanitizer import sanitize

MAX_WARDROBE_ITEMS = 50
MAX_PREFERRED_COLORS = 10
EMPTY_WARDROBE = "No items in wardrobe yet"
NO_PROFILE = "No profile information available"
NOT_SPECIFIED = "not specified"

# Per-field length caps applied before anything reaches a prompt
PROFILE_FIELD_LIMITS = {
    "gender": 20,
    "body_type": 30,
    "skin_tone": 30,
    "hair_color": 30,
    "hair_style": 30,
    "style_preference": 50,
}
COLOR_LIMIT = 20
WARDROBE_FIELD_LIMITS = {"color": 30, "category": 30, "name": 50}

GENDER_CONTEXTS = {
    "male": (
        "The user is MALE. Suggest masculine clothing items such as men's shirts, trousers, "
        "suits, blazers, jeans, t-shirts, polo shirts, chinos and leather jackets. "
        "Do NOT suggest womenswear or feminine-cut garments."
    ),
    "female": (
        "The user is FEMALE. Suggest feminine clothing items such as dresses, skirts, blouses, "
        "women's jeans, heels, flats and cardigans. Tailored pieces like blazers, trousers "
        "and shirts in women's cuts are also appropriate."
    ),
    "unspecified": (
        "Gender not specified. Suggest only gender-neutral, versatile clothing items and do "
        "not assume the user's gender."
    ),
}

GENDER_NOUNS = {"male": "man", "female": "woman", "unspecified": "person"}
GENDER_WEAR = {"male": "MEN'S", "female": "WOMEN'S", "unspecified": "gender-neutral"}


def resolve_gender(raw: Optional[str]) -> str:
    """Map a sanitized gender string onto male | female | unspecified."""
    value = (raw or "").strip().lower()
    return value if value in ("male", "female") else "unspecified"


def profile_gender(profile: Optional[StyleProfileInput]) -> str:
    """Resolved gender of a possibly missing, untrusted profile."""
    if profile is None:
        return "unspecified"
    return resolve_gender(sanitize(profile.gender, PROFILE_FIELD_LIMITS["gender"]))


def gender_context(gender: str) -> str:
    return GENDER_CONTEXTS.get(gender, GENDER_CONTEXTS["unspecified"])


@dataclass(frozen=True)
class SanitizedWardrobeItem:
    name: str
    category: str
    color: str

    def describe(self) -> str:
        return f"{self.color} {self.category} ({self.name})"


@dataclass(frozen=True)
class NormalizedContext:
    """Everything the recommendation prompt needs, already safe to embed"""
    profile_description: str
    wardrobe_description: str
    gender_context: str
    gender: str
    has_wardrobe: bool


def sanitize_wardrobe(wardrobe: Iterable[WardrobeEntryInput]) -> List[SanitizedWardrobeItem]:
    """Keep the first 50 items and sanitize each field independently."""
    items = []
    for entry in list(wardrobe or [])[:MAX_WARDROBE_ITEMS]:
        items.append(
            SanitizedWardrobeItem(
                name=sanitize(entry.name, WARDROBE_FIELD_LIMITS["name"]),
                category=sanitize(entry.category, WARDROBE_FIELD_LIMITS["category"]),
                color=sanitize(entry.color, WARDROBE_FIELD_LIMITS["color"]),
            )
        )
    return items


def _describe_profile(profile: StyleProfileInput, gender: str) -> str:
    fields = {
        name: sanitize(getattr(profile, name), limit) for name, limit in PROFILE_FIELD_LIMITS.items()
    }
    colors = [sanitize(c, COLOR_LIMIT) for c in profile.preferred_colors[:MAX_PREFERRED_COLORS]]
    colors = [c for c in colors if c]

    return (
        f"Gender: {gender}, "
        f"Body type: {fields['body_type'] or NOT_SPECIFIED}, "
        f"Skin tone: {fields['skin_tone'] or NOT_SPECIFIED}, "
        f"Hair color: {fields['hair_color'] or NOT_SPECIFIED}, "
        f"Hair style: {fields['hair_style'] or NOT_SPECIFIED}, "
        f"Style preference: {fields['style_preference'] or NOT_SPECIFIED}, "
        f"Preferred colors: {', '.join(colors) or NOT_SPECIFIED}"
    )


def normalize(
    profile: Optional[StyleProfileInput],
    wardrobe: Optional[Iterable[WardrobeEntryInput]],
) -> NormalizedContext:
    """
    Build the prompt context for one recommendation request.

    Args:
        profile: Untrusted profile, or None when the user has none
        wardrobe: Untrusted wardrobe entries; only the first 50 are used

    Returns:
        NormalizedContext with sanitized descriptions and the gender constraint
    """
    gender = profile_gender(profile)
    if profile is not None:
        profile_description = _describe_profile(profile, gender)
    else:
        profile_description = NO_PROFILE

    items = sanitize_wardrobe(wardrobe or [])
    wardrobe_description = ", ".join(item.describe() for item in items) if items else EMPTY_WARDROBE

    return NormalizedContext(
        profile_description=profile_description,
        wardrobe_description=wardrobe_description,
        gender_context=gender_context(gender),
        gender=gender,
        has_wardrobe=bool(items),
    )
