"""
Modelos del catálogo (menú y productos)
"""
from sqlmodel import SQLModel, Field
from typing import Optional

from .base import TimestampMixin


class MenuItemBase(SQLModel):
    name: str = Field(max_length=100)
    description: str = Field(max_length=500)
    price: float = Field(ge=0)
    image: str = Field(max_length=255, description="Ruta de la imagen")
    link: Optional[str] = Field(default=None, max_length=255)


class MenuItem(MenuItemBase, TimestampMixin, table=True):
    __tablename__ = "menu_items"

    id: Optional[int] = Field(default=None, primary_key=True)


class MenuItemRead(MenuItemBase):
    id: int


class ProductBase(SQLModel):
    name: str = Field(max_length=100)
    price: float = Field(ge=0)
    description: str = Field(max_length=500)
    image: str = Field(max_length=255, description="Ruta de la imagen")


class Product(ProductBase, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)


class ProductRead(ProductBase):
    id: int
