from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.database import get_session
from app.models.catalog import ProductRead
from app.services.catalog import CatalogService


router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductRead])
def get_products(session: Session = Depends(get_session)):
    return CatalogService.list_products(session)
