# app/models.py
from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    # accept both the wire keys (nama/harga/stok) and attribute names
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ---------------------------
# Stored entities
# ---------------------------
class Product(_WireModel):
    id: int
    name: str = Field("", alias="nama")
    price: int = Field(0, alias="harga")
    stock: int = Field(0, alias="stok")
    category_id: int = 0


class Category(_WireModel):
    id: int
    name: str = ""
    description: str = ""


# ---------------------------
# Write payloads (POST / PUT bodies)
# ---------------------------
class ProductIn(_WireModel):
    name: str = Field("", alias="nama")
    price: int = Field(0, alias="harga")
    stock: int = Field(0, alias="stok")
    category_id: int = 0


class CategoryIn(_WireModel):
    name: str = ""
    description: str = ""


def to_wire(entity: BaseModel) -> dict:
    return entity.model_dump(by_alias=True)
