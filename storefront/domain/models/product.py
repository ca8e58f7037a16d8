from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Optional, Union

ProductType = Literal["knife", "tool"]
PRODUCT_TYPES = ("knife", "tool")

KNIFE_CATEGORIES = ["Tactical", "Bushcraft", "Kitchen", "Butcher"]
TOOL_CATEGORIES = ["Axe", "Machete", "Swords"]

# Categories used before the knife/tool split; all of them were knives
LEGACY_CATEGORY_TYPES: Dict[str, ProductType] = {
    "Outdoor": "knife",
    "Koleksi": "knife",
    "Dapur": "knife",
    "Survival": "knife",
}

ID_PREFIXES: Dict[str, str] = {"knife": "k_", "tool": "t_"}

# camelCase on the wire and in stored documents, snake_case in Python
_WIRE = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Maker(BaseModel):
    """Who created or last updated a record."""
    email: str = ""
    name: str = ""


class Product(BaseModel):
    model_config = _WIRE

    id: str = ""
    title: str = ""
    price: int = 0                      # IDR, whole units
    type: ProductType = "knife"
    category: str = ""
    images: List[str] = Field(default_factory=list)   # first image is primary
    steel: str = ""
    handle_material: str = ""

    # Dimensions
    blade_length_cm: float = 0
    handle_length_cm: float = 0
    blade_thickness_mm: Optional[float] = None
    weight_gr: Optional[float] = None

    # Styles
    blade_style: str = ""
    handle_style: str = ""

    description: str = ""
    specs: Dict[str, Union[str, int, float]] = Field(default_factory=dict)

    created_at: str = ""
    updated_at: str = ""
    created_by: Optional[Maker] = None
    updated_by: Optional[Maker] = None

    def to_doc(self) -> dict:
        return self.model_dump(by_alias=True)


class LegacyProduct(BaseModel):
    """Pre-unification product shape still served to v1 API consumers."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    title: str = ""
    price: int = 0
    category: str = ""
    image: str = ""
    steel: str = ""
    handle_material: str = Field(default="", alias="handleMaterial")
    blade_length: float = Field(default=0, alias="bladeLength")
    handle_length: float = Field(default=0, alias="handleLength")
    blade_style: str = Field(default="", alias="bladeStyle")
    handle_style: str = Field(default="", alias="handleStyle")

    def to_doc(self) -> dict:
        return self.model_dump(by_alias=True)
