"""Testimonial schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ReviewItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    author: str
    quote: str
    zip: str
    rating: int
    is_local: bool = Field(False, description="True when the review is from the lead's own zip")


class ReviewSelection(BaseModel):
    reviews: list[ReviewItem] = Field(default_factory=list)
    five_star_total: int = 0
