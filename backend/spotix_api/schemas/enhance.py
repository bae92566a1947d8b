from typing import Optional

from pydantic import BaseModel

class EnhanceBody(BaseModel):
    eventName: Optional[str] = None
    eventDescription: Optional[str] = None
    eventDate: Optional[str] = None
    eventVenue: Optional[str] = None
    eventType: Optional[str] = None

class EnhanceOut(BaseModel):
    enhancedDescription: str
