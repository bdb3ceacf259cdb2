from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from riders_api import domain


class EventPayload(BaseModel):
    # must be absent on create and present on update
    id: int | None = Field(None, examples=[None])
    name: str = Field(..., min_length=1, max_length=255, examples=["Coastal 10K"])
    date: datetime = Field(examples=["2024-05-01T09:00:00+02:00"])
    km: float | None = Field(None, ge=0, examples=[10.0])
    route: str | None = Field(None, max_length=255, examples=["Barceloneta - Port Olimpic"])
    description: str | None = Field(None, examples=["Easy pace along the seafront"])
    creator: str | None = Field(None, max_length=50, examples=["admin"])
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Coastal 10K",
                "date": "2024-05-01T09:00:00+02:00",
                "km": 10.0,
                "route": "Barceloneta - Port Olimpic",
                "description": "Easy pace along the seafront",
                "creator": "admin",
            }
        }
    )

    def to_domain(self) -> domain.Event:
        return domain.Event(**self.model_dump())


class EventResponse(BaseModel):
    id: int
    name: str
    date: datetime
    km: float | None = None
    route: str | None = None
    description: str | None = None
    creator: str | None = None
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Coastal 10K",
                "date": "2024-05-01T07:00:00Z",
                "km": 10.0,
                "route": "Barceloneta - Port Olimpic",
                "description": "Easy pace along the seafront",
                "creator": "admin",
            }
        },
    )


class EventSummaryResponse(BaseModel):
    name: str
    km: float | None = None
    route: str | None = None
    description: str | None = None
    model_config = ConfigDict(from_attributes=True)
