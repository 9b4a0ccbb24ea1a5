from datetime import datetime
from pydantic import BaseModel


class Claims(BaseModel):
    sub: str
    username: str
    exp: datetime


class User(BaseModel):
    id: str
    username: str
    created_at: datetime
