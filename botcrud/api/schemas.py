"""
Request and response models for the BotCRUD HTTP API.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.schema import BotStatus


def _require_some_field(model: BaseModel) -> BaseModel:
    if not model.model_fields_set:
        raise ValueError("at least one field must be provided")
    return model


def _not_blank(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError("cannot be empty")
    return v


# Bots

class BotCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100, description="Bot name")
    description: Optional[str] = Field(default=None, max_length=500, description="Bot description")
    status: Optional[BotStatus] = Field(default=None, description="Bot status")

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v):
        return _not_blank(v)


class BotUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    status: Optional[BotStatus] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v):
        if v is None:
            raise ValueError("name cannot be null")
        return _not_blank(v)

    @field_validator("status")
    @classmethod
    def status_must_not_be_null(cls, v):
        if v is None:
            raise ValueError("status cannot be null")
        return v

    @model_validator(mode="after")
    def at_least_one_field(self):
        return _require_some_field(self)


# Workers

class WorkerCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100, description="Worker name")
    description: Optional[str] = Field(default=None, max_length=500, description="Worker description")
    bot: str = Field(min_length=1, description="Owning bot ID")

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v):
        return _not_blank(v)


class WorkerUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    bot: Optional[str] = Field(default=None, min_length=1)

    @field_validator("name", "bot")
    @classmethod
    def must_not_be_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return _not_blank(v)

    @model_validator(mode="after")
    def at_least_one_field(self):
        return _require_some_field(self)


# Logs

class LogCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str = Field(min_length=1, max_length=1000, description="Log message")
    bot: str = Field(min_length=1, description="Bot ID")
    worker: str = Field(min_length=1, description="Worker ID")

    @field_validator("message")
    @classmethod
    def message_must_not_be_empty(cls, v):
        return _not_blank(v)


class LogUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str = Field(min_length=1, max_length=1000, description="Log message")

    @field_validator("message")
    @classmethod
    def message_must_not_be_empty(cls, v):
        return _not_blank(v)


# Responses

class ApiResponse(BaseModel):
    statusCode: int = 200
    message: str = "Success"
    data: Any = None


class ErrorResponse(BaseModel):
    statusCode: int
    error: str
    message: str


class PaginatedData(BaseModel):
    count: int
    items: List[dict]
    page: int
    perPage: int


class PaginatedResponse(ApiResponse):
    data: PaginatedData


# Documented error bodies for the resource routers
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid payload, filter or reference"},
    404: {"model": ErrorResponse, "description": "Record not found"},
    409: {"model": ErrorResponse, "description": "Duplicate name or dependent records"},
}


class HealthData(BaseModel):
    status: str
    timestamp: str
    service: str


class DetailedHealthData(HealthData):
    environment: str
    uptime: float
    memory: dict
    stats: dict
