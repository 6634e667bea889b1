"""Request schemas for the HTTP and CLI surfaces."""

from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field

from load_planner.catalog import DEFAULT_BOXES, DEFAULT_CONTAINERS, check_unique_ids
from load_planner.models import BoxType, Container, Item, Package


def _unique(entries):
    check_unique_ids(entries)
    return entries


BoxCatalog = Annotated[List[BoxType], AfterValidator(_unique)]
Fleet = Annotated[List[Container], AfterValidator(_unique)]
WorkingSet = Annotated[List[Item], AfterValidator(_unique)]


class ItemRequestSchema(BaseModel):
    """Schema for single-item requests (recommendation, box options)."""
    item: Item
    boxes: BoxCatalog = Field(default_factory=lambda: list(DEFAULT_BOXES), description="Box catalog")


class ItemsRequestSchema(BaseModel):
    """Schema for requests over a set of items (bundle, quote)."""
    items: WorkingSet = Field(description="Working set of items")
    boxes: BoxCatalog = Field(default_factory=lambda: list(DEFAULT_BOXES), description="Box catalog")


class PackRequestSchema(BaseModel):
    """Schema for packing already-resolved packages into one container."""
    container: Container
    packages: List[Package] = Field(description="Packages with outer dimensions")
    market_rate: Optional[float] = Field(None, gt=0, description="Rate per free m3 for space offers")


class PlanRequestSchema(BaseModel):
    """Schema for a fleet plan or a container confirmation."""
    items: WorkingSet = Field(description="Cross-client shipment items")
    boxes: BoxCatalog = Field(default_factory=lambda: list(DEFAULT_BOXES), description="Box catalog")
    containers: Fleet = Field(default_factory=lambda: list(DEFAULT_CONTAINERS), description="Fleet")
    assignments: dict[str, str] = Field(default_factory=dict, description="client_id -> container_id")
    container_id: Optional[str] = Field(None, description="Container to confirm as shipped")


class EstimateTextSchema(BaseModel):
    text: str = Field(min_length=1, description="Free-text product description")


class EstimateImageSchema(BaseModel):
    image_b64: str = Field(min_length=1, description="Base64 encoded image")
    mime_type: str = Field("image/jpeg", description="Image MIME type")


class IntakeRequestSchema(BaseModel):
    """Schema for handing one client's items over to the shipment."""
    items: WorkingSet = Field(description="Items entered for one client")
    client_id: Optional[str] = Field(None, min_length=1, description="Client tag; a new #NNNN tag is minted when omitted")
