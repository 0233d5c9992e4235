"""
Authentication service - registration and login.
"""
import logging
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.config import settings
from imobi.core.security import get_password_hash, verify_password, create_access_token
from imobi.core.exceptions import raise_already_exists, raise_unauthorized
from imobi.repositories.user_repo import UserRepository
from imobi.repositories.activity_repo import ActivityLogRepository
from imobi.models.activity import Actions

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.activity_repo = ActivityLogRepository(session)

    async def register(
        self,
        email: str,
        password: str,
        org_name: str,
        full_name: Optional[str] = None
    ) -> dict:
        """Register an operator together with a new agency."""
        existing = await self.user_repo.get_by_email(email)
        if existing:
            raise_already_exists("User", "email", email)

        user, org = await self.user_repo.create_with_org(
            email=email,
            password_hash=get_password_hash(password),
            org_name=org_name,
            full_name=full_name
        )
        logger.info("Registered user %s for agency %s", user.id, org.id)

        await self.activity_repo.log(
            org_id=org.id,
            actor_id=user.id,
            action=Actions.USER_REGISTERED,
            entity_type="user",
            entity_id=user.id,
            description=f"User {email} registered"
        )

        return {
            "message": "User registered successfully",
            "user_id": str(user.id),
            "org_id": str(org.id)
        }

    async def login(self, email: str, password: str) -> dict:
        """Authenticate and return an access token."""
        user = await self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise_unauthorized("Incorrect email or password")

        if not user.is_active:
            raise_unauthorized("User account is deactivated")

        access_token = create_access_token({
            "sub": user.email,
            "user_id": str(user.id),
            "org_id": str(user.org_id)
        })

        await self.user_repo.update_last_login(user.id)
        await self.activity_repo.log(
            org_id=user.org_id,
            actor_id=user.id,
            action=Actions.USER_LOGGED_IN,
            entity_type="user",
            entity_id=user.id
        )

        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        }
