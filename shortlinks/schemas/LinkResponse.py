from pydantic import BaseModel
from datetime import datetime

from shortlinks.core.config import settings


# Response DTOs
class LinkResponse(BaseModel):
    id: int
    url: str
    short_code: str
    short_url: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_link(cls, link) -> "LinkResponse":
        return cls(
            id=link.id,
            url=link.url,
            short_code=link.short_code,
            short_url=f"{settings.BASE_URL}/{link.short_code}",
            created_at=link.created_at,
            updated_at=link.updated_at,
        )
