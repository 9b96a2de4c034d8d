# models.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

class Offer(BaseModel):
    id: Optional[int] = None
    name: str = Field(min_length=1)
    value_props: List[str]
    ideal_use_cases: List[str]
    created_at: Optional[datetime] = None

class Lead(BaseModel):
    id: Optional[int] = None
    name: str = ""
    role: Optional[str] = None
    company: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    linkedin_bio: Optional[str] = None
    uploaded_at: Optional[datetime] = None

    def profile_fields(self) -> List[Optional[str]]:
        return [self.name, self.role, self.company, self.industry, self.location, self.linkedin_bio]

class ScoreResult(BaseModel):
    id: int
    lead_id: int
    offer_id: int
    intent: str
    score: int = Field(ge=0, le=100)
    reasoning: str
    created_at: datetime

class ScoredLead(BaseModel):
    lead_id: int
    name: str
    role: Optional[str] = None
    company: Optional[str] = None
    intent: str
    score: int
    reasoning: str

class ScoringRun(BaseModel):
    count: int
    results: List[ScoredLead]

class ResultRow(BaseModel):
    """One scored result joined with the lead it belongs to."""
    id: int
    lead_id: int
    offer_id: int
    name: str
    role: Optional[str] = None
    company: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    intent: str
    score: int
    reasoning: str
    created_at: datetime
