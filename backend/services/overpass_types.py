from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class OverpassCenter(BaseModel):
    lat: float
    lon: float


class OverpassElement(BaseModel):
    type: Optional[str] = None  # "node", "way", "relation"
    id: int
    lat: Optional[float] = None
    lon: Optional[float] = None
    center: Optional[OverpassCenter] = None  # only for ways/relations with `out center`
    tags: Optional[Dict[str, str]] = None


class OverpassResponse(BaseModel):
    # Elements stay raw here; each one is validated on its own during normalization
    elements: List[Any] = Field(default_factory=list)
