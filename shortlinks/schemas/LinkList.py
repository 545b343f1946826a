from pydantic import BaseModel
from typing import List

from shortlinks.schemas.LinkResponse import LinkResponse


class LinkList(BaseModel):
    total: int
    links: List[LinkResponse]
