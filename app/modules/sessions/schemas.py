from pydantic import BaseModel
from datetime import datetime


class SessionResponse(BaseModel):
    id: str
    user_id: str
    expiration_date: datetime

    class Config:
        from_attributes = True
