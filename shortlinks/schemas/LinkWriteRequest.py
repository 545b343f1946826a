from pydantic import BaseModel


# Request DTO for create and update. Only the shape is checked here; the
# registry validates the values so errors come back per field.
class LinkWriteRequest(BaseModel):
    url: str
    short_code: str
