"""
Citizen reward points
"""
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from civicresolve.errors import InvalidInputError
from civicresolve.models.user import RewardWallet
from civicresolve.utils.validators import validate_user_id


class RewardWalletService:
    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _user_id(user_id: str) -> str:
        try:
            return validate_user_id(user_id)
        except ValueError as e:
            raise InvalidInputError(str(e))

    def _insert(self):
        if self.db.get_bind().dialect.name == "postgresql":
            return pg_insert(RewardWallet)
        return sqlite_insert(RewardWallet)

    async def balance(self, user_id: str) -> int:
        """Unknown users simply have no points yet"""
        user_id = self._user_id(user_id)
        result = await self.db.execute(
            select(RewardWallet.points).where(RewardWallet.user_id == user_id)
        )
        return result.scalar_one_or_none() or 0

    async def add(self, user_id: str, points: int) -> int:
        user_id = self._user_id(user_id)
        now = datetime.utcnow()

        # First-time adds race on the unique user_id; the loser's insert is a no-op
        await self.db.execute(
            self._insert()
            .values(user_id=user_id, points=0, created_at=now, updated_at=now)
            .on_conflict_do_nothing(index_elements=[RewardWallet.user_id])
        )
        await self.db.execute(
            update(RewardWallet)
            .where(RewardWallet.user_id == user_id)
            .values(points=RewardWallet.points + (points or 0), updated_at=now)
        )
        return await self.balance(user_id)
