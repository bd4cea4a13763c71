from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ConnectionResponse(BaseModel):
    id: str
    provider_name: str
    provider_id: str
    user_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ConnectionListItem(BaseModel):
    id: str
    provider_name: str
    provider_label: str
    provider_id: str
    created_at: Optional[datetime] = None
