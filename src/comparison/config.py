"""Configuration — scales, tolerances, display labels."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings


class RatingScale(BaseModel):
    minimum: float = 1.0
    maximum: float = 5.0

    @model_validator(mode="after")
    def _check_bounds(self) -> RatingScale:
        if self.maximum <= self.minimum:
            raise ValueError("rating scale maximum must exceed minimum")
        return self


class DisplaySettings(BaseModel):
    currency_symbol: str = "$"
    true_label: str = "Yes"
    false_label: str = "No"


class Settings(BaseSettings):
    score_scale: float = Field(default=100.0, gt=0.0)
    weight_total: int = Field(default=100, gt=0)
    tie_epsilon: float = Field(default=1e-6, ge=0.0)

    rating_scale: RatingScale = RatingScale()
    display: DisplaySettings = DisplaySettings()

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "COMPARISON_",
        "env_nested_delimiter": "__",
    }


settings = Settings()
