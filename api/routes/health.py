from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from api.dependencies import get_app_settings
from api.schemas import HealthResponse
from config.settings import Settings

router = APIRouter(prefix='/api', tags=['health'])


@router.get('/health', response_model=HealthResponse, summary='Service health check')
async def health_check(
	settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
	return HealthResponse(
		message=f'{settings.APP_NAME} is running',
		timestamp=datetime.now(UTC).isoformat().replace('+00:00', 'Z'),
		version=settings.APP_VERSION,
	)
