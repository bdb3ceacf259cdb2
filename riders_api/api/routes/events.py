import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from riders_api.api.alerts import entity_alert, failure_alert
from riders_api.api.deps import get_current_login, get_event_service
from riders_api.schemas.event import EventPayload, EventResponse, EventSummaryResponse
from riders_api.services.event_service import EventError, EventService, NotFound, StorageFailure


router = APIRouter(prefix="/api", tags=["events"])
logger = logging.getLogger(__name__)


def _http_error(exc: EventError) -> HTTPException:
    if isinstance(exc, NotFound):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, StorageFailure):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=status_code, detail=str(exc), headers=failure_alert(exc.error_key))


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventPayload,
    response: Response,
    service: EventService = Depends(get_event_service),
):
    logger.debug("REST request to save Event : %s", payload)
    try:
        event = service.create(payload.to_domain())
    except EventError as exc:
        raise _http_error(exc)
    response.headers["Location"] = f"/api/events/{event.id}"
    response.headers.update(entity_alert("created", event.id))
    return event


@router.put("/events", response_model=EventResponse)
def update_event(
    payload: EventPayload,
    response: Response,
    service: EventService = Depends(get_event_service),
):
    logger.debug("REST request to update Event : %s", payload)
    try:
        event = service.update(payload.to_domain())
    except EventError as exc:
        raise _http_error(exc)
    response.headers.update(entity_alert("updated", event.id))
    return event


@router.get("/events", response_model=list[EventResponse])
def list_events(
    response: Response,
    page: int = Query(0),
    size: int | None = Query(None),
    sort: list[str] | None = Query(None, examples=[["km,desc", "name"]]),
    service: EventService = Depends(get_event_service),
):
    logger.debug("REST request to get a page of Events")
    try:
        result = service.list_all(page, size, sort)
    except EventError as exc:
        raise _http_error(exc)
    response.headers["X-Total-Count"] = str(result.total)
    return result.items


@router.get("/events-dto", response_model=list[EventSummaryResponse])
def list_event_summaries(
    sort: list[str] | None = Query(None),
    service: EventService = Depends(get_event_service),
):
    logger.debug("REST request to get all Event summaries")
    try:
        return service.list_ordered(sort)
    except EventError as exc:
        raise _http_error(exc)


@router.get("/events/dateAfter/", response_model=list[EventResponse])
def list_events_after(
    date_string: str = Query(..., alias="dateString", examples=["2024-04-30"]),
    service: EventService = Depends(get_event_service),
):
    logger.debug("REST request to get Events after %s", date_string)
    try:
        return service.list_by_date_after(date_string)
    except EventError as exc:
        raise _http_error(exc)


@router.get("/events/dateBefore/", response_model=list[EventResponse])
def list_events_before(
    date_string: str = Query(..., alias="dateString", examples=["2024-04-30"]),
    service: EventService = Depends(get_event_service),
):
    logger.debug("REST request to get Events before %s", date_string)
    try:
        return service.list_by_date_before(date_string)
    except EventError as exc:
        raise _http_error(exc)


@router.get("/events/by-Name/{name}", response_model=list[EventResponse])
def list_events_by_name(name: str, service: EventService = Depends(get_event_service)):
    logger.debug("REST request to get Events named %s", name)
    try:
        return service.list_by_name(name)
    except EventError as exc:
        raise _http_error(exc)


@router.get("/events/mine", response_model=list[EventResponse])
def list_my_events(
    login: str = Depends(get_current_login),
    service: EventService = Depends(get_event_service),
):
    logger.debug("REST request to get Events created by %s", login)
    try:
        return service.list_owned_by(login)
    except EventError as exc:
        raise _http_error(exc)


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(event_id: int, service: EventService = Depends(get_event_service)):
    logger.debug("REST request to get Event : %s", event_id)
    try:
        return service.get_by_id(event_id)
    except EventError as exc:
        raise _http_error(exc)


@router.delete("/events/{event_id}")
def delete_event(event_id: int, service: EventService = Depends(get_event_service)):
    logger.debug("REST request to delete Event : %s", event_id)
    try:
        service.delete_by_id(event_id)
    except EventError as exc:
        raise _http_error(exc)
    return Response(status_code=status.HTTP_200_OK, headers=entity_alert("deleted", event_id))
