from decimal import Decimal
from typing import Annotated, Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel, PlainSerializer, model_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Decimal inside the app, JSON number on the wire
DecimalNumber = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

def _without_empty(data: dict) -> dict:
    return {key: value for key, value in data.items() if value is not None}

class CamelModel(BaseModel):
    """Base schema exposing camelCase field names on the wire"""
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class ApiResponse(BaseModel, Generic[T]):
    """Success envelope; data and message are left out when empty"""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None

    @model_serializer(mode="wrap")
    def drop_empty_keys(self, handler):
        return _without_empty(handler(self))

class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: Optional[Dict[str, List[str]]] = None

    @model_serializer(mode="wrap")
    def drop_empty_keys(self, handler):
        return _without_empty(handler(self))
