from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, Dict, List

# Auth Schemas
class UserCreate(BaseModel):
    name: str = Field(..., example="Ada Lovelace")
    email: str = Field(..., example="ada@example.com")
    password: str

class LoginRequest(BaseModel):
    email: str
    password: str

class User(BaseModel):
    id: int
    name: str
    email: str
    is_active: bool = True

    class Config:
        from_attributes = True

class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: User

# Embedded item schemas
class RoundIn(BaseModel):
    id: Optional[int] = None
    name: str
    status: str = "Pending"
    date: Optional[datetime] = None
    notes: Optional[str] = None

class Round(BaseModel):
    id: int
    name: str
    status: str
    date: Optional[datetime] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True

class AttachmentIn(BaseModel):
    id: Optional[int] = None
    type: str = Field(..., example="resume")
    filename: str
    url: str
    uploaded_at: Optional[datetime] = None

class Attachment(BaseModel):
    id: int
    type: str
    filename: str
    url: str
    uploaded_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class Document(BaseModel):
    name: str
    url: str

    class Config:
        from_attributes = True

# Application Tracker Schemas
class ApplicationCreate(BaseModel):
    company_name: Optional[str] = Field(None, example="Acme")
    role: Optional[str] = Field(None, example="Engineer")
    status: Optional[str] = Field(None, example="Applied")
    rounds: Optional[List[RoundIn]] = None
    notes: Optional[str] = None

class ApplicationUpdate(BaseModel):
    company_name: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    rounds: Optional[List[RoundIn]] = None
    documents: Optional[List[Document]] = None
    attachments: Optional[List[AttachmentIn]] = None

class StatusUpdate(BaseModel):
    status: Optional[str] = Field(None, example="In Process")

class RoundCreate(BaseModel):
    name: Optional[str] = Field(None, example="System Design")

class Application(BaseModel):
    id: int
    owner_id: int
    company_name: str
    role: str
    status: str
    notes: Optional[str] = None
    rounds: List[Round] = []
    attachments: List[Attachment] = []
    documents: List[Document] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ApplicationPipeline(BaseModel):
    application_id: int
    current_stage: str
    rounds: List[Round]
    current_attachments: Dict[str, Optional[Attachment]]

class ApplicationSummary(BaseModel):
    total: int
    interviews: int
    offers: int
    by_status: Dict[str, int]

class Message(BaseModel):
    message: str
