"""API routes for the admin dashboard."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, EmailStr, Field

from bayangida import errors
from bayangida.models.account import ExtensionOfficer, UserAccount
from bayangida.models.driver import Driver, DriverSummary
from bayangida.models.farmer import Farmer
from bayangida.models.notification import Notification
from bayangida.models.order import Order
from bayangida.models.payout import PayoutRequest
from bayangida.models.produce import ProduceListing
from bayangida.services import (
    DashboardOverview,
    DashboardStats,
    DriverRegistry,
    FarmerRegistry,
    OfficerRoster,
    OrderBoard,
    OrderLifecycleManager,
    PayoutDesk,
    ProduceReview,
    UserDirectory,
)
from bayangida.state.manager import StateManager, get_state_manager
from bayangida.state.store import DocumentStore
from bayangida.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


# Request/Response Models


class AssignDriverRequest(BaseModel):
    """Driver chosen for a pending order."""

    driver_id: str


class AssignDriverResponse(BaseModel):
    """Assigned order plus notification outcome."""

    order: Order
    notification_id: str | None = None
    warning: str | None = None


class AdvanceStatusRequest(BaseModel):
    """Requested order status."""

    status: str


class ReviewRequest(BaseModel):
    """Buyer ratings for a delivered order."""

    # Range checks happen in the lifecycle so every caller gets the same error.
    product_rating: Any
    product_feedback: str | None = None
    logistics_rating: Any
    logistics_feedback: str | None = None


class ApplicationDecisionRequest(BaseModel):
    """Outcome of a driver registration review."""

    decision: str = Field(description="approved or rejected")


class ProduceDecisionRequest(BaseModel):
    """Outcome of a produce listing review."""

    decision: str = Field(description="approved or rejected")
    quality_grade: str | None = Field(default=None, description="A, B or C; approvals only")


class StatusChangeRequest(BaseModel):
    """Requested record status."""

    status: str


class NewOfficerRequest(BaseModel):
    """Extension officer to onboard."""

    name: str = Field(min_length=1)
    email: EmailStr
    phone: str | None = None
    location: str | None = None
    specialization: str | None = None


# Dependencies


async def get_store(
    state_manager: StateManager = Depends(get_state_manager),
) -> DocumentStore:
    """Get the document store."""
    return DocumentStore(state_manager)


async def get_lifecycle(store: DocumentStore = Depends(get_store)) -> OrderLifecycleManager:
    """Get the order lifecycle manager."""
    return OrderLifecycleManager(store)


async def get_order_board(store: DocumentStore = Depends(get_store)) -> OrderBoard:
    """Get the order board."""
    return OrderBoard(store)


async def get_driver_registry(store: DocumentStore = Depends(get_store)) -> DriverRegistry:
    """Get the driver registry."""
    return DriverRegistry(store)


async def get_farmer_registry(store: DocumentStore = Depends(get_store)) -> FarmerRegistry:
    """Get the farmer registry."""
    return FarmerRegistry(store)


async def get_produce_review(store: DocumentStore = Depends(get_store)) -> ProduceReview:
    """Get the produce review queue."""
    return ProduceReview(store)


async def get_payout_desk(store: DocumentStore = Depends(get_store)) -> PayoutDesk:
    """Get the payout desk."""
    return PayoutDesk(store)


async def get_user_directory(store: DocumentStore = Depends(get_store)) -> UserDirectory:
    """Get the user directory."""
    return UserDirectory(store)


async def get_officer_roster(store: DocumentStore = Depends(get_store)) -> OfficerRoster:
    """Get the extension officer roster."""
    return OfficerRoster(store)


async def get_overview(store: DocumentStore = Depends(get_store)) -> DashboardOverview:
    """Get the dashboard overview."""
    return DashboardOverview(store)


# Error translation

_STATUS_CODES: dict[type[errors.WorkflowError], int] = {
    errors.NotFound: status.HTTP_404_NOT_FOUND,
    errors.ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    errors.IllegalTransition: status.HTTP_409_CONFLICT,
    errors.AlreadyReviewed: status.HTTP_409_CONFLICT,
    errors.ConcurrentUpdateConflict: status.HTTP_409_CONFLICT,
}


def to_http_error(error: errors.WorkflowError) -> HTTPException:
    """Map a workflow error to an HTTP error response."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type in type(error).__mro__:
        if error_type in _STATUS_CODES:
            status_code = _STATUS_CODES[error_type]
            break

    logger.info(
        "request_rejected",
        error_type=type(error).__name__,
        status_code=status_code,
        detail=str(error),
    )
    return HTTPException(
        status_code=status_code,
        detail={
            "error": type(error).__name__,
            "message": str(error),
            "retryable": error.retryable,
        },
    )


# Order routes


@router.get("/orders", response_model=list[Order])
async def list_orders(
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = None,
    board: OrderBoard = Depends(get_order_board),
) -> list[Order]:
    """List orders in a status tab, optionally searched."""
    try:
        return await board.list_orders(status=status_filter, search=search)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    board: OrderBoard = Depends(get_order_board),
) -> Order:
    """Get order details."""
    try:
        return await board.get_order(order_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.post("/orders/{order_id}/assignment", response_model=AssignDriverResponse)
async def assign_driver(
    order_id: str,
    request: AssignDriverRequest,
    lifecycle: OrderLifecycleManager = Depends(get_lifecycle),
) -> AssignDriverResponse:
    """
    Assign a driver to a pending order.

    A failed driver notification does not fail the request; it is
    returned as a warning alongside the assigned order.
    """
    try:
        result = await lifecycle.assign_driver(order_id, request.driver_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e

    return AssignDriverResponse(
        order=result.order,
        notification_id=result.notification_id,
        warning=str(result.notification_error) if result.notification_error else None,
    )


@router.post("/orders/{order_id}/status", response_model=Order)
async def advance_status(
    order_id: str,
    request: AdvanceStatusRequest,
    lifecycle: OrderLifecycleManager = Depends(get_lifecycle),
) -> Order:
    """Move an order to shipped, completed or cancelled."""
    try:
        return await lifecycle.advance_status(order_id, request.status)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.post("/orders/{order_id}/review", response_model=Order)
async def record_review(
    order_id: str,
    request: ReviewRequest,
    lifecycle: OrderLifecycleManager = Depends(get_lifecycle),
) -> Order:
    """Record the buyer's review of a completed order."""
    try:
        return await lifecycle.record_review(
            order_id,
            product_rating=request.product_rating,
            product_feedback=request.product_feedback,
            logistics_rating=request.logistics_rating,
            logistics_feedback=request.logistics_feedback,
        )
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


# Driver routes


@router.get("/drivers", response_model=list[Driver])
async def list_drivers(
    search: str | None = None,
    registry: DriverRegistry = Depends(get_driver_registry),
) -> list[Driver]:
    """List registered drivers."""
    return await registry.list_drivers(search=search)


@router.get("/drivers/eligible", response_model=list[DriverSummary])
async def list_eligible_drivers(
    lifecycle: OrderLifecycleManager = Depends(get_lifecycle),
) -> list[DriverSummary]:
    """Drivers who can take a new order now. An empty list is a normal answer."""
    return await lifecycle.list_eligible_drivers()


@router.get("/drivers/{driver_id}", response_model=Driver)
async def get_driver(
    driver_id: str,
    registry: DriverRegistry = Depends(get_driver_registry),
) -> Driver:
    """Get driver details."""
    try:
        return await registry.get_driver(driver_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.post("/drivers/{driver_id}/application", response_model=Driver)
async def decide_application(
    driver_id: str,
    request: ApplicationDecisionRequest,
    registry: DriverRegistry = Depends(get_driver_registry),
) -> Driver:
    """Approve or reject a driver registration."""
    try:
        return await registry.decide_application(driver_id, request.decision)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.get("/drivers/{driver_id}/notifications", response_model=list[Notification])
async def list_notifications(
    driver_id: str,
    registry: DriverRegistry = Depends(get_driver_registry),
) -> list[Notification]:
    """List a driver's notifications."""
    try:
        return await registry.list_notifications(driver_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


# Overview


@router.get("/overview", response_model=DashboardStats)
async def get_dashboard_stats(
    overview: DashboardOverview = Depends(get_overview),
) -> DashboardStats:
    """Headline counters for the landing page."""
    return await overview.stats()


# Farmer routes


@router.get("/farmers", response_model=list[Farmer])
async def list_farmers(
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = None,
    farmers: FarmerRegistry = Depends(get_farmer_registry),
) -> list[Farmer]:
    """List farmer registrations."""
    try:
        return await farmers.list_farmers(status=status_filter, search=search)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.get("/farmers/{farmer_id}", response_model=Farmer)
async def get_farmer(
    farmer_id: str,
    farmers: FarmerRegistry = Depends(get_farmer_registry),
) -> Farmer:
    """Get farmer details."""
    try:
        return await farmers.get_farmer(farmer_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.post("/farmers/{farmer_id}/registration", response_model=Farmer)
async def decide_farmer_registration(
    farmer_id: str,
    request: ApplicationDecisionRequest,
    farmers: FarmerRegistry = Depends(get_farmer_registry),
) -> Farmer:
    """Approve or reject a farmer registration."""
    try:
        return await farmers.decide_registration(farmer_id, request.decision)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


# Produce routes


@router.get("/produce", response_model=list[ProduceListing])
async def list_produce(
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = None,
    review: ProduceReview = Depends(get_produce_review),
) -> list[ProduceListing]:
    """List produce listings."""
    try:
        return await review.list_listings(status=status_filter, search=search)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.get("/produce/{listing_id}", response_model=ProduceListing)
async def get_produce(
    listing_id: str,
    review: ProduceReview = Depends(get_produce_review),
) -> ProduceListing:
    """Get listing details."""
    try:
        return await review.get_listing(listing_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.post("/produce/{listing_id}/review", response_model=ProduceListing)
async def decide_produce(
    listing_id: str,
    request: ProduceDecisionRequest,
    review: ProduceReview = Depends(get_produce_review),
) -> ProduceListing:
    """Approve (with a grade) or reject a produce listing."""
    try:
        return await review.decide_listing(listing_id, request.decision, request.quality_grade)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


# Payout routes


@router.get("/payouts", response_model=list[PayoutRequest])
async def list_payouts(
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = None,
    desk: PayoutDesk = Depends(get_payout_desk),
) -> list[PayoutRequest]:
    """List payout requests."""
    try:
        return await desk.list_payouts(status=status_filter, search=search)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.get("/payouts/open", response_model=list[PayoutRequest])
async def list_open_payouts(
    search: str | None = None,
    desk: PayoutDesk = Depends(get_payout_desk),
) -> list[PayoutRequest]:
    """Pending and approved payout requests."""
    return await desk.list_open_payouts(search=search)


@router.get("/payouts/{payout_id}", response_model=PayoutRequest)
async def get_payout(
    payout_id: str,
    desk: PayoutDesk = Depends(get_payout_desk),
) -> PayoutRequest:
    """Get payout request details."""
    try:
        return await desk.get_payout(payout_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.post("/payouts/{payout_id}/status", response_model=PayoutRequest)
async def update_payout_status(
    payout_id: str,
    request: StatusChangeRequest,
    desk: PayoutDesk = Depends(get_payout_desk),
) -> PayoutRequest:
    """Approve, reject or process a payout request."""
    try:
        return await desk.update_payout_status(payout_id, request.status)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


# User routes


@router.get("/users", response_model=list[UserAccount])
async def list_users(
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = None,
    users: UserDirectory = Depends(get_user_directory),
) -> list[UserAccount]:
    """List buyer accounts."""
    try:
        return await users.list_users(status=status_filter, search=search)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.get("/users/{user_id}", response_model=UserAccount)
async def get_user(
    user_id: str,
    users: UserDirectory = Depends(get_user_directory),
) -> UserAccount:
    """Get account details."""
    try:
        return await users.get_user(user_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.post("/users/{user_id}/status", response_model=UserAccount)
async def set_user_status(
    user_id: str,
    request: StatusChangeRequest,
    users: UserDirectory = Depends(get_user_directory),
) -> UserAccount:
    """Suspend or reactivate an account."""
    try:
        return await users.set_user_status(user_id, request.status)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


# Extension officer routes


@router.get("/officers", response_model=list[ExtensionOfficer])
async def list_officers(
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = None,
    roster: OfficerRoster = Depends(get_officer_roster),
) -> list[ExtensionOfficer]:
    """List extension officers."""
    try:
        return await roster.list_officers(status=status_filter, search=search)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.post("/officers", response_model=ExtensionOfficer, status_code=status.HTTP_201_CREATED)
async def add_officer(
    request: NewOfficerRequest,
    roster: OfficerRoster = Depends(get_officer_roster),
) -> ExtensionOfficer:
    """Onboard an extension officer."""
    try:
        return await roster.add_officer(**request.model_dump())
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.get("/officers/{officer_id}", response_model=ExtensionOfficer)
async def get_officer(
    officer_id: str,
    roster: OfficerRoster = Depends(get_officer_roster),
) -> ExtensionOfficer:
    """Get officer details."""
    try:
        return await roster.get_officer(officer_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.post("/officers/{officer_id}/suspension", response_model=ExtensionOfficer)
async def toggle_officer_suspension(
    officer_id: str,
    roster: OfficerRoster = Depends(get_officer_roster),
) -> ExtensionOfficer:
    """Suspend an active officer or reactivate a suspended one."""
    try:
        return await roster.toggle_suspension(officer_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e


@router.delete("/officers/{officer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_officer(
    officer_id: str,
    roster: OfficerRoster = Depends(get_officer_roster),
) -> Response:
    """Remove an extension officer."""
    try:
        await roster.remove_officer(officer_id)
    except errors.WorkflowError as e:
        raise to_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
