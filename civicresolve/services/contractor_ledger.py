"""
Contractor ledger - ranking and score accumulation
"""
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from civicresolve.models.contractor import Contractor


class ContractorLedger:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, contractor_id: str) -> Optional[Contractor]:
        result = await self.db.execute(
            select(Contractor).where(Contractor.id == contractor_id)
        )
        return result.scalar_one_or_none()

    async def list_ranked(self) -> List[Contractor]:
        """Contractors by points, highest first; earlier registrations win ties"""
        result = await self.db.execute(
            select(Contractor).order_by(Contractor.points.desc(), Contractor.registered_at.asc())
        )
        return list(result.scalars().all())

    async def register(self, contractor_id: str, name: str, quality_rating: float = 0) -> Contractor:
        contractor = Contractor(id=contractor_id, name=name, quality_rating=quality_rating)
        self.db.add(contractor)
        await self.db.flush()
        return contractor

    async def credit(self, contractor_id: str, points: int) -> bool:
        """
        Add an evaluation's points and count one more completed work.

        Returns False when no contractor has this id.
        """
        result = await self.db.execute(
            update(Contractor)
            .where(Contractor.id == contractor_id)
            .values(
                points=Contractor.points + points,
                total_works=Contractor.total_works + 1,
            )
        )
        return result.rowcount > 0
