from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict

class ProductIn(BaseModel):
    # Presence is the only check; a missing name is left for the NOT NULL column to reject
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = None

class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = None

class Message(BaseModel):
    message: str

class DeleteAllResult(Message):
    deleted: int
