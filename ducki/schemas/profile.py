from pydantic import BaseModel
from typing import Optional


class ProfileResponse(BaseModel):
    id: int
    email: Optional[str] = None
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    is_public: bool = False

    model_config = {"from_attributes": True}
