from pydantic import BaseModel

from app.schemas.users import UserRead


class RegisterResponse(BaseModel):
    message: str
    user: UserRead
