"""
Complaints API endpoints
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel

from civicresolve.database import get_db
from civicresolve.models.complaint import ComplaintPriority, ComplaintStatus
from civicresolve.services.blob_store import LocalBlobStore
from civicresolve.services.complaint_query import ComplaintQuery
from civicresolve.services.lifecycle import ComplaintLifecycle
from civicresolve.api.roads import RoadProject, list_road_projects

router = APIRouter()


class LocationResponse(BaseModel):
    lat: float
    lng: float
    address: str
    state: str
    district: str
    city: str
    landmark: str


class StatusHistoryResponse(BaseModel):
    status: str
    timestamp: datetime
    note: Optional[str]

    class Config:
        from_attributes = True


class ComplaintResponse(BaseModel):
    id: str
    tracking_id: str
    title: str
    description: str
    category: str
    priority: str
    status: str
    location: LocationResponse
    photo: Optional[str]
    votes: int
    department: Optional[str]
    assigned_contractor_id: Optional[str]
    assigned_at: Optional[datetime]
    evaluating_department: Optional[str]
    status_history: List[StatusHistoryResponse]
    ai_analysis: Optional[Dict[str, Any]]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ComplaintListResponse(BaseModel):
    complaints: List[ComplaintResponse]
    total: int


class StatusUpdate(BaseModel):
    status: ComplaintStatus
    note: Optional[str] = None
    department: Optional[str] = None
    contractor_id: Optional[str] = None
    evaluating_department: Optional[str] = None


class EvaluationRequest(BaseModel):
    points: int = 0
    feedback: Optional[str] = None


class EvaluationResponse(BaseModel):
    complaint: ComplaintResponse
    contractor_updated: bool


class ReopenRequest(BaseModel):
    reason: Optional[str] = None


class AnalysisAttach(BaseModel):
    analysis: Optional[Dict[str, Any]] = None


class VoteResponse(BaseModel):
    votes: int


class StatsResponse(BaseModel):
    total: int
    byStatus: Dict[str, int]
    byCategory: Dict[str, int]
    byPriority: Dict[str, int]
    hotspots: List[Dict[str, Any]]


@router.post("/", response_model=ComplaintResponse, status_code=201)
async def create_complaint(
    title: str = Form(""),
    description: str = Form(""),
    category: str = Form("Other"),
    priority: ComplaintPriority = Form(ComplaintPriority.MEDIUM),
    lat: float = Form(0, ge=-90, le=90),
    lng: float = Form(0, ge=-180, le=180),
    address: str = Form(""),
    state: str = Form(""),
    district: str = Form(""),
    city: str = Form(""),
    landmark: str = Form(""),
    photo: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
):
    """Register a citizen complaint, with an optional photo"""

    photo_url = None
    if photo is not None and photo.filename:
        photo_url = await LocalBlobStore().save(photo)

    lifecycle = ComplaintLifecycle(db)
    complaint = await lifecycle.create(
        {
            "title": title,
            "description": description,
            "category": category,
            "priority": priority.value,
            "latitude": lat,
            "longitude": lng,
            "address": address,
            "state": state,
            "district": district,
            "city": city,
            "landmark": landmark,
        },
        photo_url=photo_url,
    )
    await db.commit()

    return complaint


@router.get("/", response_model=ComplaintListResponse)
async def list_complaints(
    category: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """List complaints with filters; 'all' disables a filter"""

    complaints = await ComplaintQuery(db).list(
        category=category, status=status, priority=priority, search=search, sort=sort
    )
    return {"complaints": complaints, "total": len(complaints)}


@router.get("/track/{tracking_id}", response_model=ComplaintResponse)
async def track_complaint(tracking_id: str, db: AsyncSession = Depends(get_db)):
    """Look up a complaint by its public tracking id"""
    return await ComplaintQuery(db).get_by_tracking_id(tracking_id)


@router.get("/analytics/stats", response_model=StatsResponse)
async def get_stats(db: AsyncSession = Depends(get_db)):
    """Counts by status, category and priority plus map hotspots"""
    return await ComplaintQuery(db).stats()


@router.get("/roads/list", response_model=List[RoadProject])
async def list_roads(status: Optional[str] = None):
    return list_road_projects(status)


@router.put("/{complaint_id}/vote", response_model=VoteResponse)
async def vote_complaint(complaint_id: str, db: AsyncSession = Depends(get_db)):
    votes = await ComplaintLifecycle(db).vote(complaint_id)
    await db.commit()
    return {"votes": votes}


@router.put("/{complaint_id}/status", response_model=ComplaintResponse)
async def update_status(
    complaint_id: str,
    body: StatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Admin: change status, route to a department and/or assign a contractor"""

    complaint = await ComplaintLifecycle(db).update_status(
        complaint_id,
        body.status.value,
        note=body.note,
        department=body.department,
        contractor_id=body.contractor_id,
        evaluating_department=body.evaluating_department,
    )
    await db.commit()
    return complaint


@router.post("/{complaint_id}/evaluate", response_model=EvaluationResponse)
async def evaluate_contractor(
    complaint_id: str,
    body: EvaluationRequest,
    db: AsyncSession = Depends(get_db),
):
    """Admin: score the contractor assigned to this complaint"""

    result = await ComplaintLifecycle(db).evaluate(complaint_id, body.points, body.feedback)
    await db.commit()
    return result


@router.put("/{complaint_id}/reopen", response_model=ComplaintResponse)
async def reopen_complaint(
    complaint_id: str,
    body: Optional[ReopenRequest] = None,
    db: AsyncSession = Depends(get_db),
):
    """Citizen: reopen a complaint that wasn't actually fixed"""

    reason = body.reason if body else None
    complaint = await ComplaintLifecycle(db).reopen(complaint_id, reason)
    await db.commit()
    return complaint


@router.put("/{complaint_id}/analysis", response_model=ComplaintResponse)
async def save_analysis(
    complaint_id: str,
    body: AnalysisAttach,
    db: AsyncSession = Depends(get_db),
):
    complaint = await ComplaintLifecycle(db).attach_analysis(complaint_id, body.analysis)
    await db.commit()
    return complaint


@router.delete("/latest")
async def delete_latest_complaint(db: AsyncSession = Depends(get_db)):
    """Development helper: remove the most recently created complaint"""

    removed = await ComplaintLifecycle(db).delete_latest()
    await db.commit()
    return {"success": True, "removed": ComplaintResponse.model_validate(removed).model_dump()}


@router.delete("/{complaint_id}")
async def delete_complaint(complaint_id: str, db: AsyncSession = Depends(get_db)):
    await ComplaintLifecycle(db).delete(complaint_id)
    await db.commit()
    return {"success": True, "message": "Complaint deleted"}
