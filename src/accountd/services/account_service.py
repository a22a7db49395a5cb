"""Account service: store access for accounts.

Learn: Service layer separates store calls from HTTP routing.
API routes call services, services call the database. Update and
delete report whether a row matched; what to do about a miss is the
route's decision.
"""

import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from accountd.db.models import Account, utcnow


class AccountService:
    """CRUD over the accounts table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_accounts(self) -> list[Account]:
        result = await self.db.execute(
            select(Account).order_by(Account.created_at, Account.id)
        )
        return list(result.scalars().all())

    async def get_account(self, account_id: uuid.UUID) -> Account | None:
        return await self.db.get(Account, account_id)

    async def create_account(self, name: str) -> Account:
        account = Account(name=name)
        self.db.add(account)
        await self.db.commit()
        return account

    async def update_account(self, account_id: uuid.UUID, name: str) -> bool:
        """Rename an account. Returns False if no account has that id."""
        result = await self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(name=name, updated_at=utcnow())
        )
        await self.db.commit()
        return result.rowcount > 0

    async def delete_account(self, account_id: uuid.UUID) -> bool:
        """Remove an account. Returns False if no account has that id."""
        result = await self.db.execute(
            delete(Account).where(Account.id == account_id)
        )
        await self.db.commit()
        return result.rowcount > 0
