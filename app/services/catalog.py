"""
Servicio de lectura del catálogo
"""
from typing import List

from sqlmodel import Session, select

from app.models.catalog import MenuItem, Product


class CatalogService:
    """Listados de sólo lectura del menú y los productos"""

    @staticmethod
    def list_menu(session: Session) -> List[MenuItem]:
        return list(session.exec(select(MenuItem).order_by(MenuItem.id)).all())

    @staticmethod
    def list_products(session: Session) -> List[Product]:
        return list(session.exec(select(Product).order_by(Product.id)).all())

    @staticmethod
    def replace_catalog(
        session: Session,
        *,
        menu_items: List[MenuItem],
        products: List[Product],
    ) -> None:
        """Borrar el catálogo actual y cargar el nuevo en una sola transacción"""
        for existing in session.exec(select(MenuItem)).all():
            session.delete(existing)
        for existing in session.exec(select(Product)).all():
            session.delete(existing)
        session.add_all(menu_items)
        session.add_all(products)
        session.commit()
