"""
Router del menú
"""
import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.database import get_session
from app.models.catalog import MenuItemRead
from app.services.catalog import CatalogService


router = APIRouter(prefix="/menu", tags=["menu"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[MenuItemRead])
def get_menu(session: Session = Depends(get_session)):
    items = CatalogService.list_menu(session)
    logger.debug("GET /api/menu -> %s items", len(items))
    return items
