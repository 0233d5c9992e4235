"""
User repository.
"""
import uuid
from typing import Optional
from datetime import datetime

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from imobi.models.user import User, Organization
from imobi.repositories.base import BaseRepository, data_access


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    @data_access
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        query = select(User).where(User.email == email)
        result = await self.session.exec(query)
        return result.first()

    @data_access
    async def create_with_org(
        self,
        email: str,
        password_hash: str,
        org_name: str,
        full_name: Optional[str] = None
    ) -> tuple[User, Organization]:
        """Create a user together with a new agency."""
        org = Organization(name=org_name)
        self.session.add(org)
        await self.session.flush()  # Get org.id without committing

        user = User(
            email=email,
            password_hash=password_hash,
            org_id=org.id,
            full_name=full_name
        )
        self.session.add(user)

        await self.session.commit()
        await self.session.refresh(org)
        await self.session.refresh(user)

        return user, org

    @data_access
    async def update_last_login(self, user_id: uuid.UUID) -> None:
        """Update user's last login timestamp."""
        user = await self.session.get(User, user_id)
        if user:
            user.last_login_at = datetime.utcnow()
            self.session.add(user)
            await self.session.commit()
