"""
Complaint lifecycle engine

Every mutation of a complaint goes through ComplaintLifecycle: it checks
preconditions, applies the change through the record store and appends the
matching status history entry. Evaluations also credit the contractor ledger.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from civicresolve.config import get_settings
from civicresolve.errors import (
    NotFoundError, InvalidStateError, InvalidTransitionError, InvalidInputError,
)
from civicresolve.models.complaint import (
    Complaint, ComplaintStatus, EVALUATED, REGISTERED_NOTE,
)
from civicresolve.services.blob_store import LocalBlobStore
from civicresolve.services.complaint_store import ComplaintStore
from civicresolve.services.contractor_ledger import ContractorLedger
from civicresolve.utils.helpers import format_points
from civicresolve.utils.logger import get_logger
from civicresolve.utils.validators import validate_latitude, validate_longitude

settings = get_settings()
logger = get_logger(__name__)

S = ComplaintStatus

# Intended workflow: pending -> in-progress -> resolved -> reopened -> in-progress ...
ALLOWED_TRANSITIONS = {
    S.PENDING: {S.IN_PROGRESS, S.RESOLVED},
    S.IN_PROGRESS: {S.RESOLVED, S.PENDING},
    S.RESOLVED: {S.REOPENED, S.IN_PROGRESS},
    S.REOPENED: {S.IN_PROGRESS, S.RESOLVED},
}

LOCATION_FIELDS = ("latitude", "longitude", "address", "state", "district", "city", "landmark")


def is_transition_allowed(current: str, requested: str) -> bool:
    """Same-state updates (note only) are always allowed"""
    if current == requested:
        return True
    try:
        return ComplaintStatus(requested) in ALLOWED_TRANSITIONS.get(ComplaintStatus(current), set())
    except ValueError:
        return False


class ComplaintLifecycle:
    def __init__(
        self,
        db: AsyncSession,
        blob_store: Optional[LocalBlobStore] = None,
        enforce_transitions: Optional[bool] = None,
    ):
        self.store = ComplaintStore(db)
        self.ledger = ContractorLedger(db)
        self.blob_store = blob_store or LocalBlobStore()
        if enforce_transitions is None:
            enforce_transitions = settings.ENFORCE_STATUS_TRANSITIONS
        self.enforce_transitions = enforce_transitions

    async def _require(self, complaint_id: str) -> Complaint:
        complaint = await self.store.get(complaint_id)
        if not complaint:
            raise NotFoundError("Complaint not found")
        return complaint

    async def create(self, data: Dict[str, Any], photo_url: Optional[str] = None) -> Complaint:
        """Register a new complaint in the pending state"""
        try:
            validate_latitude(data.get("latitude") or 0)
            validate_longitude(data.get("longitude") or 0)
        except ValueError as e:
            raise InvalidInputError(str(e))

        now = datetime.utcnow()
        complaint = Complaint(
            tracking_id=await self.store.new_tracking_id(),
            title=data.get("title") or "",
            description=data.get("description") or "",
            category=data.get("category") or "Other",
            priority=data.get("priority") or "medium",
            status=ComplaintStatus.PENDING.value,
            photo=photo_url,
            votes=0,
            created_at=now,
            updated_at=now,
        )
        for field in LOCATION_FIELDS:
            value = data.get(field)
            if value is not None:
                setattr(complaint, field, value)
        self.store.append_history(complaint, ComplaintStatus.PENDING.value, REGISTERED_NOTE, timestamp=now)

        await self.store.add(complaint)
        logger.info(f"Complaint {complaint.tracking_id} registered ({complaint.category}, {complaint.priority})")
        return complaint

    async def vote(self, complaint_id: str) -> int:
        votes = await self.store.increment_votes(complaint_id)
        if votes is None:
            raise NotFoundError("Complaint not found")
        return votes

    async def update_status(
        self,
        complaint_id: str,
        status: str,
        note: Optional[str] = None,
        department: Optional[str] = None,
        contractor_id: Optional[str] = None,
        evaluating_department: Optional[str] = None,
    ) -> Complaint:
        """
        Admin status change, optionally routing and assigning the complaint.

        Re-assignment overwrites the contractor; the previous one survives
        only in earlier history notes.
        """
        complaint = await self._require(complaint_id)
        try:
            status = ComplaintStatus(status).value
        except ValueError:
            raise InvalidInputError(f"Unknown status '{status}'")

        if self.enforce_transitions and not is_transition_allowed(complaint.status, status):
            raise InvalidTransitionError(complaint.status, status)

        now = datetime.utcnow()
        previous = complaint.status
        complaint.status = status
        if department:
            complaint.department = department
        if contractor_id:
            complaint.assigned_contractor_id = contractor_id
            complaint.assigned_at = now
        if evaluating_department:
            complaint.evaluating_department = evaluating_department

        self.store.append_history(complaint, status, note or f"Status updated to {status}", timestamp=now)
        await self.store.save(complaint)

        logger.info(f"Complaint {complaint.tracking_id}: {previous} -> {status}")
        return complaint

    async def evaluate(self, complaint_id: str, points: int = 0, feedback: Optional[str] = None) -> Dict[str, Any]:
        """
        Score the assigned contractor's work on a complaint.

        The contractor credit is best-effort: an unknown contractor id is
        reported through contractor_updated=False while the evaluation entry
        is still recorded.
        """
        complaint = await self._require(complaint_id)
        if not complaint.assigned_contractor_id:
            raise InvalidStateError("No contractor assigned")

        points = points or 0
        contractor_updated = await self.ledger.credit(complaint.assigned_contractor_id, points)
        if not contractor_updated:
            logger.warning(
                f"Contractor {complaint.assigned_contractor_id} not found while evaluating "
                f"{complaint.tracking_id}; score not recorded"
            )

        note = f"Contractor Evaluated. Feedback: {feedback or 'None'} ({format_points(points)} pts)"
        self.store.append_history(complaint, EVALUATED, note)
        await self.store.save(complaint)

        logger.info(f"Complaint {complaint.tracking_id} evaluated: {format_points(points)} pts")
        return {"complaint": complaint, "contractor_updated": contractor_updated}

    async def reopen(self, complaint_id: str, reason: Optional[str] = None) -> Complaint:
        complaint = await self._require(complaint_id)

        complaint.status = ComplaintStatus.REOPENED.value
        self.store.append_history(
            complaint, ComplaintStatus.REOPENED.value, reason or "Complaint reopened by citizen"
        )
        await self.store.save(complaint)

        logger.info(f"Complaint {complaint.tracking_id} reopened")
        return complaint

    async def attach_analysis(self, complaint_id: str, analysis: Optional[Dict[str, Any]]) -> Complaint:
        """Replace the stored analysis; not a lifecycle transition, so no history"""
        complaint = await self._require(complaint_id)
        complaint.ai_analysis = analysis
        await self.store.save(complaint)
        return complaint

    async def _remove(self, complaint: Complaint) -> None:
        photo = complaint.photo
        await self.store.remove(complaint)
        self.blob_store.delete(photo)
        logger.info(f"Complaint {complaint.tracking_id} deleted")

    async def delete(self, complaint_id: str) -> None:
        complaint = await self._require(complaint_id)
        await self._remove(complaint)

    async def delete_latest(self) -> Complaint:
        """Development helper: drop the most recently created complaint"""
        complaint = await self.store.get_latest()
        if not complaint:
            raise NotFoundError("No complaints")
        await self._remove(complaint)
        return complaint
