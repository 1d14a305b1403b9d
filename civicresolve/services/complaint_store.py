"""
Complaint record store - persistence primitives used by the lifecycle engine.

Counters are changed with single UPDATE statements and history is written as
new rows, so concurrent requests against one complaint never lose a vote or a
history entry.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from civicresolve.models.complaint import Complaint, StatusHistoryEntry
from civicresolve.utils.helpers import generate_tracking_id

TRACKING_ID_ATTEMPTS = 5


class ComplaintStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, complaint_id: str) -> Optional[Complaint]:
        result = await self.db.execute(
            select(Complaint).where(Complaint.id == complaint_id)
        )
        return result.scalar_one_or_none()

    async def get_latest(self) -> Optional[Complaint]:
        result = await self.db.execute(
            select(Complaint).order_by(Complaint.created_at.desc()).limit(1)
        )
        return result.scalars().first()

    async def tracking_id_exists(self, tracking_id: str) -> bool:
        result = await self.db.execute(
            select(func.count(Complaint.id)).where(Complaint.tracking_id == tracking_id)
        )
        return (result.scalar() or 0) > 0

    async def new_tracking_id(self) -> str:
        """Generate a tracking id not already taken"""
        for _ in range(TRACKING_ID_ATTEMPTS):
            candidate = generate_tracking_id()
            if not await self.tracking_id_exists(candidate):
                return candidate
        raise RuntimeError("Could not allocate a unique tracking id")

    async def add(self, complaint: Complaint) -> Complaint:
        self.db.add(complaint)
        await self.db.flush()
        return complaint

    async def increment_votes(self, complaint_id: str) -> Optional[int]:
        """Atomically add one vote; None when the complaint doesn't exist"""
        result = await self.db.execute(
            update(Complaint)
            .where(Complaint.id == complaint_id)
            .values(votes=Complaint.votes + 1, updated_at=datetime.utcnow())
        )
        if result.rowcount == 0:
            return None

        votes = await self.db.execute(
            select(Complaint.votes).where(Complaint.id == complaint_id)
        )
        return votes.scalar_one()

    def append_history(
        self,
        complaint: Complaint,
        status: str,
        note: Optional[str],
        timestamp: Optional[datetime] = None,
    ) -> StatusHistoryEntry:
        """Queue a new history row; flushed with the owning complaint"""
        entry = StatusHistoryEntry(
            status=status,
            note=note,
            timestamp=timestamp or datetime.utcnow(),
        )
        complaint.status_history.append(entry)
        return entry

    async def save(self, complaint: Complaint) -> Complaint:
        complaint.updated_at = datetime.utcnow()
        await self.db.flush()
        return complaint

    async def remove(self, complaint: Complaint) -> None:
        await self.db.delete(complaint)
        await self.db.flush()
