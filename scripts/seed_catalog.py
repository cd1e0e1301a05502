#!/usr/bin/env python3
"""
Script para cargar el menú y los productos iniciales
"""
import argparse
import sys
from pathlib import Path

# Añadir el directorio raíz del proyecto al sys.path
project_root = Path(__file__).resolve().parents[1]
sys.path.append(str(project_root))

from sqlmodel import Session

from app.core.config import settings
from app.core.database import build_engine, create_db_and_tables
from app.models.catalog import MenuItem, Product
from app.services.catalog import CatalogService


MENU_ITEMS = [
    {"name": "Rice", "description": "Steamed white rice", "price": 5.99, "image": "rice.jpg"},
    {"name": "Pasta", "description": "Creamy Alfredo pasta", "price": 7.49, "image": "pasta.jpg"},
    {"name": "Beans", "description": "Nutritious cooked beans", "price": 4.99, "image": "beans.jpg"},
    {"name": "Spaghetti", "description": "Tomato-based spaghetti", "price": 6.99, "image": "spaghetti.jpg"},
    {"name": "Noodles", "description": "Spicy stir-fried noodles", "price": 5.49, "image": "noodles.jpg"},
    {"name": "Cheese", "description": "Fresh and creamy cheese", "price": 3.99, "image": "cheese.jpg"},
    {"name": "Curry-Sauce", "description": "Savory curry sauce", "price": 4.49, "image": "curry-sauce.jpg"},
    {"name": "Stew", "description": "Rich beef stew", "price": 6.49, "image": "stew.jpg"},
    {"name": "Turkey", "description": "Juicy roasted turkey", "price": 8.99, "image": "turkey.jpg"},
]

PRODUCTS = [
    {"name": "Apple", "price": 1.99, "description": "Fresh and juicy apple.", "image": "/images/apple.jpg"},
    {"name": "Banana", "price": 0.99, "description": "Ripe and sweet banana.", "image": "/images/banana.jpg"},
    {"name": "Orange", "price": 2.49, "description": "Citrusy and tangy orange.", "image": "/images/orange.jpg"},
]


def seed_catalog(session: Session) -> None:
    """Reemplazar el catálogo completo por los datos iniciales"""
    CatalogService.replace_catalog(
        session,
        menu_items=[MenuItem(**item) for item in MENU_ITEMS],
        products=[Product(**item) for item in PRODUCTS],
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="Cargar menú y productos iniciales")
    parser.add_argument("--create-tables", action="store_true", help="Crear tablas antes de cargar")
    args = parser.parse_args()

    engine = build_engine(settings.database_url, echo=settings.sql_echo)
    if args.create_tables:
        create_db_and_tables(engine)

    with Session(engine) as session:
        print("🌱 Cargando catálogo...")
        seed_catalog(session)

    print(f"✅ {len(MENU_ITEMS)} items de menú y {len(PRODUCTS)} productos cargados")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
