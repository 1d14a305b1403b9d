"""
Read-side queries over complaints: filtered listing, tracking lookup and
aggregate statistics for the dashboard and map.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from civicresolve.errors import NotFoundError
from civicresolve.models.complaint import (
    Complaint, ComplaintStatus, ComplaintPriority, PRIORITY_RANK,
)
from civicresolve.utils.validators import is_filter_active

SEARCH_FIELDS = ("title", "description", "address", "tracking_id")


def _matches(complaint: Complaint, needle: str) -> bool:
    """Case-insensitive literal substring match on any searchable field"""
    return any(needle in (getattr(complaint, field) or "").lower() for field in SEARCH_FIELDS)


class ComplaintQuery:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        category: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> List[Complaint]:
        """Filter first, then order; equal sort keys keep creation order"""
        query = select(Complaint)

        if is_filter_active(category):
            query = query.where(Complaint.category == category)
        if is_filter_active(status):
            query = query.where(Complaint.status == status)
        if is_filter_active(priority):
            query = query.where(Complaint.priority == priority)

        if sort == "votes":
            query = query.order_by(Complaint.votes.desc(), Complaint.created_at.asc())
        elif sort == "priority":
            rank = case(PRIORITY_RANK, value=Complaint.priority, else_=0)
            query = query.order_by(rank.desc(), Complaint.created_at.asc())
        else:
            query = query.order_by(Complaint.created_at.desc())

        result = await self.db.execute(query)
        complaints = list(result.scalars().all())

        # Matched in Python: SQLite's lower() only folds ASCII and LIKE treats % and _ as wildcards
        if search:
            needle = search.lower()
            complaints = [c for c in complaints if _matches(c, needle)]
        return complaints

    async def get_by_tracking_id(self, tracking_id: str) -> Complaint:
        result = await self.db.execute(
            select(Complaint).where(Complaint.tracking_id == tracking_id)
        )
        complaint = result.scalar_one_or_none()
        if not complaint:
            raise NotFoundError("Complaint not found")
        return complaint

    async def _count_by(self, column) -> Dict[str, int]:
        result = await self.db.execute(
            select(column, func.count(Complaint.id)).group_by(column)
        )
        return {key: count for key, count in result.all()}

    async def stats(self) -> Dict[str, Any]:
        total = (await self.db.execute(select(func.count(Complaint.id)))).scalar() or 0

        by_status = {s.value: 0 for s in ComplaintStatus}
        by_status.update(await self._count_by(Complaint.status))

        by_priority = {p.value: 0 for p in ComplaintPriority}
        by_priority.update(await self._count_by(Complaint.priority))

        by_category = await self._count_by(Complaint.category)

        # 0 is the "no location" default, so either coordinate at 0 excludes the point
        result = await self.db.execute(
            select(Complaint.latitude, Complaint.longitude, Complaint.title, Complaint.category)
            .where(Complaint.latitude != 0, Complaint.longitude != 0)
            .order_by(Complaint.created_at.asc())
        )
        hotspots = [
            {"lat": lat, "lng": lng, "title": title, "category": category}
            for lat, lng, title, category in result.all()
        ]

        return {
            "total": total,
            "byStatus": by_status,
            "byCategory": by_category,
            "byPriority": by_priority,
            "hotspots": hotspots,
        }
