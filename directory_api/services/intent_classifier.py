"""
Rule-based search intent classification for directory queries.

Maps a free-text query to a coarse intent (product search, pricing, comparison,
free tools) plus category / price tier / feature hints by keyword lookup. The
keyword tables are shared with the relevance engine, which uses them to expand
tag and feature matching.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class IntentType(str, Enum):
    """Coarse interpretation of what a query is after"""

    PRODUCT_SEARCH = "product_search"
    CATEGORY_BROWSE = "category_browse"
    FEATURE_SEARCH = "feature_search"
    COMPARISON = "comparison"
    PRICING = "pricing"
    FREE_TOOLS = "free_tools"


CATEGORY_SEMANTICS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "large-language-models": (
        "llm", "chatbot", "chat", "conversation", "text generation",
        "language model", "gpt", "claude", "gemini",
    ),
    "ai-art-generators": (
        "art", "image", "visual", "creative", "design", "painting",
        "drawing", "midjourney", "dalle", "stable diffusion",
    ),
    "ai-code-assistants": (
        "code", "programming", "development", "copilot", "coding",
        "developer", "ide", "autocomplete",
    ),
    "ai-writing-assistants": (
        "writing", "content", "copywriting", "grammar", "editing",
        "blog", "article", "text",
    ),
    "computer-vision": (
        "vision", "image recognition", "object detection",
        "facial recognition", "ocr", "visual",
    ),
    "ai-video-tools": ("video", "editing", "animation", "motion", "film", "movie", "clips"),
    "ai-music-generation": ("music", "audio", "sound", "song", "composition", "melody", "beats"),
    "data-analytics": (
        "analytics", "data", "insights", "business intelligence",
        "reporting", "dashboard",
    ),
    "ai-automation": ("automation", "workflow", "task", "productivity", "efficiency", "bot"),
    "ml-platforms": ("machine learning", "ml", "training", "models", "platform", "framework"),
})

PRICING_SEMANTICS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "free": ("free", "no cost", "zero cost", "gratis", "open source"),
    "freemium": ("freemium", "free tier", "free plan", "limited free"),
    "subscription": ("subscription", "monthly", "yearly", "recurring", "saas"),
    "pay-per-use": ("pay per use", "usage based", "consumption", "credits"),
    "enterprise": ("enterprise", "business", "corporate", "team"),
})

FEATURE_SEMANTICS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "api": ("api", "integration", "developer", "sdk", "webhook"),
    "realtime": ("real-time", "live", "instant", "immediate"),
    "collaboration": ("team", "collaborative", "sharing", "multi-user"),
    "cloud": ("cloud", "online", "web-based", "saas"),
    "offline": ("offline", "local", "desktop", "standalone"),
})

COMPARISON_WORDS = ("vs", "versus", "compare", "alternatives")
FREE_WORDS = ("free", "open source")

DEFAULT_CONFIDENCE = 0.5
CATEGORY_MATCH_INCREMENT = 0.2
PRICING_MATCH_INCREMENT = 0.3
FEATURE_MATCH_INCREMENT = 0.1
COMPARISON_INCREMENT = 0.4
FREE_TOOLS_INCREMENT = 0.3


@dataclass
class SearchIntent:
    """Structured interpretation of a search query"""

    type: IntentType = IntentType.PRODUCT_SEARCH
    confidence: float = DEFAULT_CONFIDENCE
    keywords: List[str] = field(default_factory=list)
    category: Optional[str] = None
    price_range: Optional[str] = None
    features: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "confidence": self.confidence,
            "keywords": list(self.keywords),
            "category": self.category,
            "price_range": self.price_range,
            "features": list(self.features),
        }


def _matching_keywords(text: str, keywords: Tuple[str, ...]) -> List[str]:
    return [keyword for keyword in keywords if keyword in text]


class IntentClassifier:
    """Keyword-table intent classifier. Stateless; safe to share."""

    def classify(self, query: str) -> SearchIntent:
        """
        Classify a raw query string.

        Args:
            query: Free-text query as typed by the user

        Returns:
            SearchIntent with type, clamped confidence and detected hints.
            A blank query gets the default product-search intent with no keywords.
        """
        normalized = (query or "").lower().strip()
        intent = SearchIntent(keywords=normalized.split())

        if not normalized:
            return intent

        confidence = DEFAULT_CONFIDENCE

        for category, keywords in CATEGORY_SEMANTICS.items():
            matches = _matching_keywords(normalized, keywords)
            if matches:
                intent.category = category
                confidence += CATEGORY_MATCH_INCREMENT * len(matches)

        for tier, keywords in PRICING_SEMANTICS.items():
            if _matching_keywords(normalized, keywords):
                intent.type = IntentType.PRICING
                intent.price_range = tier
                confidence += PRICING_MATCH_INCREMENT

        for feature, keywords in FEATURE_SEMANTICS.items():
            if _matching_keywords(normalized, keywords):
                intent.features.append(feature)
                confidence += FEATURE_MATCH_INCREMENT

        if _matching_keywords(normalized, COMPARISON_WORDS):
            intent.type = IntentType.COMPARISON
            confidence += COMPARISON_INCREMENT

        if _matching_keywords(normalized, FREE_WORDS):
            intent.type = IntentType.FREE_TOOLS
            confidence += FREE_TOOLS_INCREMENT

        intent.confidence = round(max(0.0, min(confidence, 1.0)), 4)

        logger.debug(
            f"Classified query '{normalized}' as {intent.type.value} "
            f"(confidence={intent.confidence}, category={intent.category}, "
            f"price_range={intent.price_range}, features={intent.features})"
        )
        return intent


# Global classifier instance
intent_classifier = IntentClassifier()
