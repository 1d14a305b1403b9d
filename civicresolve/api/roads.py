"""
Road project reference data shown on the public roads page
"""
from typing import List, Optional

from pydantic import BaseModel

from civicresolve.utils.validators import is_filter_active


class RoadProject(BaseModel):
    id: str
    name: str
    location: str
    status: str  # sanctioned | ongoing | completed
    progress: int
    start_date: str
    expected_end: str
    contractor: str
    budget: str


ROAD_PROJECTS = [
    RoadProject(id="R001", name="NH-48 Highway Expansion", location="Mumbai - Pune Corridor", status="ongoing", progress=65, start_date="2025-03-01", expected_end="2026-06-30", contractor="L&T Infrastructure", budget="₹450 Cr"),
    RoadProject(id="R002", name="Ring Road Phase 2", location="Bangalore Outer Ring", status="sanctioned", progress=0, start_date="2026-04-01", expected_end="2028-12-31", contractor="TBD", budget="₹800 Cr"),
    RoadProject(id="R003", name="Smart City Road Network", location="Pune - Hinjewadi", status="completed", progress=100, start_date="2024-01-15", expected_end="2025-12-01", contractor="Shapoorji Pallonji", budget="₹200 Cr"),
    RoadProject(id="R004", name="Flyover Bridge Construction", location="Delhi - Dwarka Sector 21", status="ongoing", progress=42, start_date="2025-06-01", expected_end="2027-03-30", contractor="Gammon India", budget="₹320 Cr"),
    RoadProject(id="R005", name="Village Connectivity Road", location="Rajasthan - Jodhpur District", status="sanctioned", progress=0, start_date="2026-07-01", expected_end="2027-12-31", contractor="TBD", budget="₹55 Cr"),
    RoadProject(id="R006", name="Coastal Road Project", location="Mumbai - Marine Drive to Kandivali", status="ongoing", progress=78, start_date="2024-06-01", expected_end="2026-05-31", contractor="HCC Ltd", budget="₹1200 Cr"),
    RoadProject(id="R007", name="IT Corridor Widening", location="Hyderabad - HITEC City", status="completed", progress=100, start_date="2024-09-01", expected_end="2025-11-30", contractor="NCC Ltd", budget="₹180 Cr"),
    RoadProject(id="R008", name="Metro Feeder Road Network", location="Chennai - OMR Stretch", status="ongoing", progress=30, start_date="2025-09-15", expected_end="2027-06-30", contractor="Afcons Infrastructure", budget="₹275 Cr"),
]


def list_road_projects(status: Optional[str] = None) -> List[RoadProject]:
    if is_filter_active(status):
        return [r for r in ROAD_PROJECTS if r.status == status]
    return list(ROAD_PROJECTS)
