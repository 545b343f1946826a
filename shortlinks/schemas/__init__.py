# re-export common schemas for simpler imports
from .LinkWriteRequest import LinkWriteRequest
from .LinkResponse import LinkResponse
from .LinkList import LinkList
from .ErrorResponse import ErrorResponse

__all__ = [
    "LinkWriteRequest",
    "LinkResponse",
    "LinkList",
    "ErrorResponse",
]
