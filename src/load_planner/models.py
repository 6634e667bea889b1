from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

CUSTOM_BOX_ID = "custom"
UNKNOWN_CLIENT = "Unknown"

# Padding applied per axis when a custom box is requested without dimensions
CUSTOM_BOX_PADDING_CM = 2.0

Shape = Literal["box", "cylinder", "irregular"]


class Dimensions(BaseModel):
    """Axis-aligned extent in centimeters."""

    length: float = Field(gt=0, description="Length in cm (x axis)")
    width: float = Field(gt=0, description="Width in cm (z axis)")
    height: float = Field(gt=0, description="Height in cm (y axis)")

    @property
    def volume(self) -> float:
        return float(self.length) * float(self.width) * float(self.height)

    def padded(self, margin: float) -> "Dimensions":
        return Dimensions(
            length=self.length + margin,
            width=self.width + margin,
            height=self.height + margin,
        )


class BoxType(BaseModel):
    """Catalog entry for a standard packaging box."""

    id: str = Field(description="Unique identifier within the catalog")
    name: str = Field(description="Display name")
    dimensions: Dimensions
    max_weight_kg: float = Field(gt=0, description="Maximum content weight in kg")
    color: str = Field(default="#60a5fa", description="Display color")


class Container(BaseModel):
    """Fleet entry: a vehicle or container that packages are loaded into."""

    id: str = Field(description="Unique identifier within the fleet")
    name: str = Field(description="Display name")
    dimensions: Dimensions
    max_weight_kg: float = Field(gt=0, description="Maximum payload in kg")
    is_active: bool = Field(default=False, description="Only active containers are loaded")


class CatalogBox(BaseModel):
    """Box choice pointing at a catalog entry."""

    kind: Literal["catalog"] = "catalog"
    box_id: str


class CustomBox(BaseModel):
    """Box choice with modular, item-specific dimensions."""

    kind: Literal["custom"] = "custom"
    dimensions: Dimensions


BoxChoice = Annotated[Union[CatalogBox, CustomBox], Field(discriminator="kind")]


def _dims_of(value: Any) -> Dimensions:
    if isinstance(value, Dimensions):
        return value
    return Dimensions.model_validate(value)


class Item(BaseModel):
    """A physical thing to ship, per-unit weight and dimensions."""

    id: str
    name: str = ""
    weight_kg: float = Field(ge=0, description="Weight of one unit in kg")
    dimensions: Dimensions
    shape: Shape = "box"
    is_fragile: bool = False
    is_stackable: bool = True
    box: Optional[BoxChoice] = Field(default=None, description="Selected packaging")
    quantity: int = Field(default=1, ge=1)
    pack_together: bool = Field(default=False, description="Pack all units in one box")
    client_id: str = UNKNOWN_CLIENT

    @model_validator(mode="before")
    @classmethod
    def _legacy_box_fields(cls, data: Any) -> Any:
        """
        Accept the flat `assigned_box_id` / `custom_box_dimensions` pair.

        A custom box without dimensions falls back to the item's own
        dimensions padded by CUSTOM_BOX_PADDING_CM on every axis.
        """
        if not isinstance(data, dict) or "assigned_box_id" not in data:
            return data

        data = dict(data)
        box_id = data.pop("assigned_box_id")
        custom_dims = data.pop("custom_box_dimensions", None)

        if box_id == CUSTOM_BOX_ID:
            if custom_dims is None:
                if data.get("dimensions") is None:
                    return data
                custom_dims = _dims_of(data["dimensions"]).padded(CUSTOM_BOX_PADDING_CM)
            data["box"] = CustomBox(dimensions=_dims_of(custom_dims))
        elif box_id:
            data["box"] = CatalogBox(box_id=box_id)
        return data

    @property
    def box_id(self) -> Optional[str]:
        """Catalog id, the custom sentinel, or None when nothing is selected."""
        if self.box is None:
            return None
        if isinstance(self.box, CustomBox):
            return CUSTOM_BOX_ID
        return self.box.box_id

    @property
    def effective_quantity(self) -> int:
        """Number of packages this item becomes."""
        return 1 if self.pack_together else self.quantity

    @property
    def total_weight_kg(self) -> float:
        return float(self.weight_kg) * self.quantity


class Package(BaseModel):
    """The unit the packer places: one box envelope with its contents' weight."""

    package_id: str
    item_id: str
    client_id: str = UNKNOWN_CLIENT
    box_id: str
    dimensions: Dimensions = Field(description="Outer (box) dimensions")
    weight_kg: float = Field(ge=0)
    unit_count: int = Field(default=1, ge=1, description="Physical units inside")
    color: str = "#60a5fa"


class Position(BaseModel):
    x: float
    y: float
    z: float


class PackedPackage(BaseModel):
    """A placed package; position is the center of its envelope."""

    package_id: str
    item_id: str
    box_id: str
    position: Position
    dimensions: Dimensions
    weight_kg: float
    client_id: str = UNKNOWN_CLIENT
    color: str = "#60a5fa"


class PackingMetrics(BaseModel):
    volume_utilization_pct: float = 0.0
    total_weight_kg: float = 0.0
    package_count: int = 0
    free_volume_m3: float = 0.0


class PackingResult(BaseModel):
    """Standard result returned by the container packer."""

    container_id: str
    packed: list[PackedPackage] = Field(default_factory=list)
    unpacked: list[Package] = Field(default_factory=list)
    metrics: PackingMetrics = Field(default_factory=PackingMetrics)
