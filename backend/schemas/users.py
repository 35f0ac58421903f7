# Pydantic schemas for user-related requests/responses
# fastapi-users provides the base schemas; registration adds a password confirmation.

from uuid import UUID
from fastapi_users import schemas
from pydantic import Field, model_validator


class UserRead(schemas.BaseUser[UUID]):
    pass

class UserCreate(schemas.BaseUserCreate):
    password_confirmation: str = Field(exclude=True)

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.password != self.password_confirmation:
            raise ValueError("Passwords do not match")
        return self

class UserUpdate(schemas.BaseUserUpdate):
    pass
