from pydantic import BaseModel, Field

class Credentials(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

class UserResponse(BaseModel):
    id: int
    username: str
