"""
Pydantic schemas for the support email endpoint
"""

from pydantic import BaseModel, EmailStr, Field


class HelpRequest(BaseModel):
    """Help request submitted by an authenticated user"""

    email: EmailStr
    comment: str = Field(min_length=1, max_length=1000)


class MessageResponse(BaseModel):
    message: str
