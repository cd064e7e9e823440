"""
Engine settings loaded from environment variables.

Uses pydantic-settings for validation and type safety. Every business
constant used by the scorer lives here so alternative policies can be
tested without code changes.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache

from models.policy import ScoringPolicy


class Settings(BaseSettings):
    """
    Engine settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # PALLET SCORING
    # ===================
    score_capacity_weight: float = Field(
        default=0.3,
        ge=0,
        le=1,
        description="Weight of the capacity factor (max weight / 1000) in the base score"
    )
    score_area_weight: float = Field(
        default=0.3,
        ge=0,
        le=1,
        description="Weight of the area factor (m²) in the base score"
    )
    score_efficiency_weight: float = Field(
        default=0.4,
        ge=0,
        le=1,
        description="Weight of the historical efficiency factor in the base score"
    )
    target_utilization: float = Field(
        default=0.8,
        gt=0,
        le=1,
        description="Utilization the adjusted score rewards on both axes"
    )
    standard_stack_height_cm: float = Field(
        default=200,
        gt=0,
        le=500,
        description="Assumed stacking height used for a pallet's optimal volume"
    )
    default_historical_efficiency: float = Field(
        default=0.5,
        ge=0,
        le=1,
        description="Efficiency assumed for pallets without history"
    )
    available_pallet_status: str = Field(
        default="available",
        min_length=1,
        description="Pallet status that passes the availability gate"
    )
    max_pallet_candidates: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum ranked candidates returned by pallet selection"
    )

    # ===================
    # COMPOSITION COMPLEXITY
    # ===================
    complexity_low_max_products: int = Field(
        default=5,
        ge=1,
        description="Max distinct products for a LOW complexity composition"
    )
    complexity_low_max_quantity: float = Field(
        default=50,
        ge=0,
        description="Max total quantity for a LOW complexity composition"
    )
    complexity_medium_max_products: int = Field(
        default=20,
        ge=1,
        description="Max distinct products for a MEDIUM complexity composition"
    )
    complexity_medium_max_quantity: float = Field(
        default=200,
        ge=0,
        description="Max total quantity for a MEDIUM complexity composition"
    )
    enhanced_algorithm_min_products: int = Field(
        default=10,
        ge=1,
        description="Compositions with more distinct products need the enhanced algorithm"
    )
    enhanced_algorithm_min_quantity: float = Field(
        default=200,
        ge=0,
        description="Compositions with more total quantity need the enhanced algorithm"
    )

    # ===================
    # COMPOSITION VALIDATION
    # ===================
    low_efficiency_threshold: float = Field(
        default=0.6,
        ge=0,
        le=1,
        description="Efficiency below which a composition gets a warning"
    )
    reorganize_efficiency_threshold: float = Field(
        default=0.7,
        ge=0,
        le=1,
        description="Efficiency below which reorganizing the load is recommended"
    )
    low_weight_utilization_threshold: float = Field(
        default=0.5,
        ge=0,
        le=1,
        description="Weight utilization below which adding products is recommended"
    )
    height_warning_threshold: float = Field(
        default=0.9,
        ge=0,
        le=1,
        description="Height utilization above which a stability warning is given"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    def scoring_policy(self) -> ScoringPolicy:
        """Build the immutable policy handed to the scorer."""
        return ScoringPolicy(
            capacity_weight=self.score_capacity_weight,
            area_weight=self.score_area_weight,
            efficiency_weight=self.score_efficiency_weight,
            target_utilization=self.target_utilization,
            standard_stack_height_cm=self.standard_stack_height_cm,
            default_historical_efficiency=self.default_historical_efficiency,
            available_status=self.available_pallet_status,
            max_candidates=self.max_pallet_candidates,
            complexity_low_max_products=self.complexity_low_max_products,
            complexity_low_max_quantity=self.complexity_low_max_quantity,
            complexity_medium_max_products=self.complexity_medium_max_products,
            complexity_medium_max_quantity=self.complexity_medium_max_quantity,
            enhanced_algorithm_min_products=self.enhanced_algorithm_min_products,
            enhanced_algorithm_min_quantity=self.enhanced_algorithm_min_quantity,
            low_efficiency_threshold=self.low_efficiency_threshold,
            reorganize_efficiency_threshold=self.reorganize_efficiency_threshold,
            low_weight_utilization_threshold=self.low_weight_utilization_threshold,
            height_warning_threshold=self.height_warning_threshold,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Engine settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
