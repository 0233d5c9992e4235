"""
Authentication schemas.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr


class RegisterRequest(BaseModel):
    """Operator registration request, creating the agency."""
    email: EmailStr
    password: str
    org_name: str
    full_name: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "email": "corretor@imobiliaria.com.br",
                "password": "securepassword123",
                "org_name": "Imobiliária Central",
                "full_name": "João Silva"
            }
        }


class RegisterResponse(BaseModel):
    message: str
    user_id: str
    org_id: str


class TokenResponse(BaseModel):
    """Token response after login."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
