"""
Base schemas with common functionality.
"""
from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar('T', bound='BaseSchema')
D = TypeVar('D')

class BaseSchema(BaseModel):
    """Base schema with common functionality for all schemas"""
    
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True
    )
    
    @classmethod
    def from_orm_model(cls: Type[T], orm_model: Any) -> T:
        """Create a schema instance from an ORM model"""
        return cls.model_validate(orm_model)


class ApiResponse(BaseModel, Generic[D]):
    """Envelope returned by every JSON endpoint"""
    success: bool = True
    message: str = ""
    data: Optional[D] = None
