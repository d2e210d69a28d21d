from pydantic import BaseModel, ConfigDict


class AdvertOut(BaseModel):
    id: str | int | None = None
    name: str | None = None
    link: str | None = None

    model_config = ConfigDict(extra="allow")
