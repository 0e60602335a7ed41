from accounts.core.schemas.base import BaseSchema
from accounts.core.schemas.api_response import ApiResponse

__all__ = ["ApiResponse", "BaseSchema"]
