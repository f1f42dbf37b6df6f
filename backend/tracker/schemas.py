"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable. Request bodies declare
every field optional so that missing values reach the services, which
own the validation rules and their error messages.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class CredentialsIn(BaseModel):
    """Payload for user registration/login endpoints."""
    email: Optional[str] = None
    password: Optional[str] = None


class TokenOut(BaseModel):
    """Authentication response containing a bearer token."""
    token: str


class ApplicationCreate(BaseModel):
    """Request body for creating an application.

    Only `company` and `role` are required; everything else falls back to
    the defaults documented on the `Application` model.
    """
    company: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    referral: Optional[bool] = None
    source: Optional[str] = None
    notes: Optional[str] = None


class ApplicationPatch(BaseModel):
    """Merge-patch body: every field is independently optional.

    A field left out (or sent as null) keeps its stored value, except
    `status`: an explicit null status is rejected.
    """
    company: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    referral: Optional[bool] = None
    source: Optional[str] = None
    notes: Optional[str] = None


class ApplicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company: str
    role: str
    status: str
    location: str
    referral: bool
    source: str
    notes: str
    created_at: str
    updated_at: str


class ApplicationEnvelope(BaseModel):
    application: ApplicationOut


class ApplicationList(BaseModel):
    applications: List[ApplicationOut]


class StatsOut(BaseModel):
    """Counts per status (always all five) and their sum."""
    byStatus: Dict[str, int]
    total: int
