from typing import Optional, List, Dict, Any
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from ..config import AppConfig
from ..usecases.fetch_upcoming_events import FetchUpcomingEventsUseCase

router = APIRouter(prefix="/api", tags=["calendar"])


class CalendarRequest(BaseModel):
    token: Optional[str] = None
    # authorization code; when present it is exchanged for the calendar access token
    code: Optional[str] = None


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_fetch_usecase(config: AppConfig = Depends(get_config)) -> FetchUpcomingEventsUseCase:
    return FetchUpcomingEventsUseCase(config)


@router.post("/calendar")
def fetch_calendar(
    body: CalendarRequest,
    usecase: FetchUpcomingEventsUseCase = Depends(get_fetch_usecase),
) -> List[Dict[str, Any]]:
    result = usecase.execute(body.token, code=body.code)
    return [event.to_wire() for event in result.events]
