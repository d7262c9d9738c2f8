"""
Pydantic schemas for directory listings and search
"""
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, EmailStr, Field, HttpUrl, field_validator


class ListingCategory(str, Enum):
    """Fixed category tags a listing can be filed under"""

    ai_tools = "ai-tools"
    ai_products = "ai-products"
    ai_agents = "ai-agents"
    large_language_models = "large-language-models"
    computer_vision = "computer-vision"
    natural_language_processing = "natural-language-processing"
    machine_learning_platforms = "machine-learning-platforms"
    ai_art_generators = "ai-art-generators"
    ai_video_tools = "ai-video-tools"
    ai_audio_tools = "ai-audio-tools"
    ai_writing_assistants = "ai-writing-assistants"
    ai_code_assistants = "ai-code-assistants"
    ai_data_analytics = "ai-data-analytics"
    ai_automation = "ai-automation"
    ai_chatbots = "ai-chatbots"
    ai_research_tools = "ai-research-tools"
    ai_healthcare = "ai-healthcare"
    ai_finance = "ai-finance"
    ai_education = "ai-education"
    ai_marketing = "ai-marketing"
    ai_productivity = "ai-productivity"
    ai_gaming = "ai-gaming"
    ai_robotics = "ai-robotics"
    ai_infrastructure = "ai-infrastructure"
    ai_design_tools = "ai-design-tools"
    ai_translation = "ai-translation"
    ai_voice_assistants = "ai-voice-assistants"
    ai_content_generation = "ai-content-generation"
    ai_cybersecurity = "ai-cybersecurity"
    ai_ecommerce = "ai-ecommerce"
    ai_real_estate = "ai-real-estate"
    ai_legal_tech = "ai-legal-tech"
    ai_hr_recruitment = "ai-hr-recruitment"
    ai_customer_service = "ai-customer-service"
    ai_social_media = "ai-social-media"
    ai_seo_tools = "ai-seo-tools"
    ai_image_editing = "ai-image-editing"
    ai_3d_modeling = "ai-3d-modeling"
    ai_music_generation = "ai-music-generation"
    ai_speech_recognition = "ai-speech-recognition"
    ai_predictive_analytics = "ai-predictive-analytics"
    ai_recommendation_systems = "ai-recommendation-systems"
    ai_document_processing = "ai-document-processing"
    ai_workflow_automation = "ai-workflow-automation"
    ai_virtual_assistants = "ai-virtual-assistants"
    ai_mental_health = "ai-mental-health"
    ai_fitness_wellness = "ai-fitness-wellness"
    ai_agriculture = "ai-agriculture"
    ai_environmental = "ai-environmental"
    ai_blockchain = "ai-blockchain"
    ai_mobile_apps = "ai-mobile-apps"


class SubmissionCreate(BaseModel):
    """Public submission of a new listing"""

    name: str = Field(..., min_length=1, max_length=255)
    category: ListingCategory
    url: HttpUrl
    pricing: Optional[str] = Field(None, max_length=50)
    short_description: str = Field(..., min_length=10, max_length=200)
    detailed_description: str = Field(..., min_length=50)
    contact_email: EmailStr
    tags: List[str] = []
    images: List[str] = []

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, v):
        return [tag.strip() for tag in v if tag and tag.strip()]


class SubmissionSchema(BaseModel):
    """Listing as returned by the API"""

    id: int
    name: str
    category: str
    url: str
    pricing: Optional[str] = None
    short_description: str
    detailed_description: str
    tags: List[str] = []
    images: List[str] = []
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rating: Optional[float] = None
    review_count: int = 0
    featured: bool = False
    sponsored_level: Optional[str] = None
    sponsorship_start_date: Optional[datetime] = None
    sponsorship_end_date: Optional[datetime] = None
    affiliate_url: Optional[str] = None
    promotional_banner: Optional[str] = None

    @field_validator("tags", "images", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []

    class Config:
        from_attributes = True


class AdminSubmissionSchema(SubmissionSchema):
    """Listing with the fields only administrators see"""

    contact_email: str
    commission_rate: Optional[float] = None
    monthly_clicks: int = 0
    impression_count: int = 0
    total_revenue: Optional[float] = None


class SearchResultSchema(SubmissionSchema):
    """Listing in a search result, with its relevance score when a query was given"""

    relevance_score: Optional[int] = None


class SearchIntentSchema(BaseModel):
    type: str
    confidence: float
    keywords: List[str] = []
    category: Optional[str] = None
    price_range: Optional[str] = None
    features: List[str] = []


class SearchMetricsSchema(BaseModel):
    processing_time_ms: float
    total_scanned: int
    algorithms_used: List[str]
    confidence_score: float
    semantic_matches: int
    exact_matches: int


class SearchResponse(BaseModel):
    """Search envelope consumed by the web frontend"""

    submissions: List[SearchResultSchema]
    total: int
    page: int
    limit: int
    has_more: bool = Field(..., alias="hasMore")
    intent: Optional[SearchIntentSchema] = None
    metrics: Optional[SearchMetricsSchema] = None

    class Config:
        populate_by_name = True


class SuggestionResponse(BaseModel):
    query: str
    suggestions: List[str]


class ClickResponse(BaseModel):
    id: int
    url: str


class SubmissionListResponse(BaseModel):
    """Paginated admin listing"""

    items: List[AdminSubmissionSchema]
    total: int
    page: int
    limit: int
    has_more: bool


def search_result_from_ranked(ranked: Any) -> SearchResultSchema:
    """Flatten a RankedListing into the search result schema"""
    result = SearchResultSchema.model_validate(ranked.listing)
    result.relevance_score = ranked.relevance_score
    return result
