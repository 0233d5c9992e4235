"""
Property, property type and photo schemas.
"""
import uuid
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, field_validator

from imobi.models.enums import PropertyPurpose, PropertyStatus


class PropertyTypeCreate(BaseModel):
    name: str
    description: Optional[str] = None


class PropertyTypeResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str]

    class Config:
        from_attributes = True


class PropertyBase(BaseModel):
    code: Optional[str] = None
    description: Optional[str] = None
    property_type_id: Optional[uuid.UUID] = None
    sale_price: Optional[float] = None
    rent_price: Optional[float] = None
    condominium_fee: Optional[float] = None
    iptu: Optional[float] = None
    bedrooms: Optional[int] = None
    suites: Optional[int] = None
    bathrooms: Optional[int] = None
    parking_spaces: Optional[int] = None
    area_total: Optional[float] = None
    area_util: Optional[float] = None
    address: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    owner_name: Optional[str] = None
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None
    featured: Optional[bool] = None
    published: Optional[bool] = None


class PropertyCreate(PropertyBase):
    """Create a new property listing."""
    title: str
    purpose: PropertyPurpose = PropertyPurpose.VENDA
    status: PropertyStatus = PropertyStatus.DISPONIVEL

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Apartamento 2 dormitórios em Pinheiros",
                "code": "AP-0042",
                "purpose": "locacao",
                "rent_price": 3200,
                "bedrooms": 2,
                "neighborhood": "Pinheiros",
                "city": "São Paulo",
                "state": "SP"
            }
        }


class PropertyUpdate(PropertyBase):
    """Update an existing property."""
    title: Optional[str] = None
    purpose: Optional[PropertyPurpose] = None
    status: Optional[PropertyStatus] = None

    @field_validator("title", "purpose", "status", "featured", "published")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value


class PropertyPhotoCreate(BaseModel):
    url: str
    title: Optional[str] = None
    is_cover: bool = False
    order_index: int = 0


class PropertyPhotoResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    url: str
    title: Optional[str]
    is_cover: bool
    order_index: int
    created_at: datetime

    class Config:
        from_attributes = True


class PropertyResponse(PropertyBase):
    id: uuid.UUID
    org_id: uuid.UUID
    title: str
    purpose: PropertyPurpose
    status: PropertyStatus
    featured: bool
    published: bool
    created_by: Optional[uuid.UUID]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PropertyDetailResponse(PropertyResponse):
    property_type: Optional[PropertyTypeResponse] = None
    photos: List[PropertyPhotoResponse] = []


class PropertyFilter(BaseModel):
    """Property filtering options."""
    search: Optional[str] = None  # title, code, address
    property_type_id: Optional[uuid.UUID] = None
    purpose: Optional[PropertyPurpose] = None
    status: Optional[PropertyStatus] = None
