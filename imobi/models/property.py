"""
Property listing models: types, properties and photos.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from imobi.models.enums import PropertyPurpose, PropertyStatus


class PropertyType(SQLModel, table=True):
    """Global catalogue of property types (Apartamento, Casa, Sala...)."""
    __tablename__ = "property_type"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Property(SQLModel, table=True):
    """
    Property listing, for sale and/or rent.
    Scoped to organization.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    org_id: uuid.UUID = Field(foreign_key="organization.id", index=True)
    property_type_id: Optional[uuid.UUID] = Field(default=None, foreign_key="property_type.id", index=True)

    # Identification
    code: Optional[str] = Field(default=None, index=True)
    title: str = Field(index=True)
    description: Optional[str] = None

    purpose: PropertyPurpose = Field(default=PropertyPurpose.VENDA, index=True)
    status: PropertyStatus = Field(default=PropertyStatus.DISPONIVEL, index=True)

    # Values
    sale_price: Optional[float] = None
    rent_price: Optional[float] = None
    condominium_fee: Optional[float] = None
    iptu: Optional[float] = None

    # Features
    bedrooms: Optional[int] = None
    suites: Optional[int] = None
    bathrooms: Optional[int] = None
    parking_spaces: Optional[int] = None
    area_total: Optional[float] = None
    area_util: Optional[float] = None

    # Location
    address: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Owner
    owner_name: Optional[str] = None
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None

    # Publishing
    featured: bool = Field(default=False)
    published: bool = Field(default=False)

    created_by: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class PropertyPhoto(SQLModel, table=True):
    """
    Photo attached to a property. Binary content lives in external
    storage; only the public URL is kept here.
    """
    __tablename__ = "property_photo"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    property_id: uuid.UUID = Field(foreign_key="property.id", index=True)
    url: str
    title: Optional[str] = None
    is_cover: bool = Field(default=False)
    order_index: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
