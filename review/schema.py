from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class ReviewSchema(BaseModel):
    id: int
    organizer_id: str
    staff_id: str
    job_id: int
    application_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# rating 0 means "not picked yet"; the service turns that into a friendly error
class ReviewCreatePayload(BaseModel):
    application_id: int
    rating: int = 0
    comment: str = ""
    model_config = ConfigDict(extra="forbid")


class StaffRating(BaseModel):
    staff_id: str
    average_rating: Optional[float] = None
    review_count: int = 0
    reviews: list[ReviewSchema] = []
