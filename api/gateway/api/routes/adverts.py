import logging

from fastapi import APIRouter, Depends, HTTPException, status

from gateway.schemas.adverts import AdvertOut
from gateway.services.content import get_advert
from gateway.services.editorial import EditorialNotConfiguredError, EditorialServiceError, get_editorial_client

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/advert", response_model=AdvertOut | None)
async def get_current_advert(editorial=Depends(get_editorial_client)) -> AdvertOut | None:
    try:
        advert = await get_advert(editorial)
    except EditorialNotConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except EditorialServiceError as exc:
        logger.warning("editorial advert lookup failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="editorial service failed") from exc
    return AdvertOut(**advert) if advert is not None else None
