from pydantic import BaseModel
from typing import Dict, List, Optional


class ErrorResponse(BaseModel):
    detail: str
    field_errors: Optional[Dict[str, List[str]]] = None
