# catalog_api/models.py
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from typing import Annotated, Optional


def _strip_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("name must not be blank")
    return value


Name = Annotated[str, Field(min_length=1), AfterValidator(_strip_name)]


class CategoryIn(BaseModel):
    name: Name
    description: Optional[str] = ""


class CategoryUpdate(CategoryIn):
    id: Optional[int] = None


class ProductIn(BaseModel):
    # the panel speaks camelCase on the wire
    model_config = ConfigDict(populate_by_name=True)

    name: Name
    price: float = Field(gt=0)
    description: Optional[str] = ""
    category_id: int = Field(alias="categoryId")


class ProductUpdate(ProductIn):
    id: Optional[int] = None
