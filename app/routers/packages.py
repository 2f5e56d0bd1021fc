"""Sponsorship packages and package-level interest."""
from fastapi import APIRouter, Depends, Request

from app.dependencies import get_current_user, get_optional_user, get_store, require_organizer, require_sponsor
from app.models.package import Package
from app.models.user import User
from app.routers.deals import deal_view
from app.schemas.auth import MessageResponse, SponsorSummary
from app.schemas.deals import DealEnvelope
from app.schemas.events import (
    PackageInterestListResponse,
    PackageInterestView,
    PackageListResponse,
    PackageResponse,
    PackagesCreate,
)
from app.services import catalog
from app.services import deals as deal_service
from app.store.base import Store

router = APIRouter(prefix="/api", tags=["packages"])


def package_view(store: Store, package: Package) -> PackageResponse:
    view = PackageResponse.model_validate(package)
    view.interested_sponsor_ids = store.list_package_interest_sponsor_ids(package.id)
    return view


@router.post("/events/{event_id}/packages", response_model=PackageListResponse, status_code=201)
def create_packages(
    event_id: int,
    data: PackagesCreate,
    request: Request,
    store: Store = Depends(get_store),
    organizer: User = Depends(require_organizer),
):
    """Replaces the event's packages; numbers follow list order starting at 1."""
    packages = catalog.replace_packages(store, event_id, organizer, data.packages, request)
    return PackageListResponse(
        packages=[package_view(store, p) for p in packages],
        message=f"{len(packages)} package(s) saved",
    )


@router.get("/events/{event_id}/packages", response_model=PackageListResponse)
def list_packages(event_id: int, store: Store = Depends(get_store), user: User | None = Depends(get_optional_user)):
    packages = catalog.list_packages(store, event_id, user)
    return PackageListResponse(packages=[package_view(store, p) for p in packages])


@router.get("/events/{event_id}/packages/interested-sponsors", response_model=PackageInterestListResponse)
def package_interested_sponsors(
    event_id: int,
    store: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    event = catalog.get_owned_event(store, event_id, current_user)
    views = []
    for package in store.list_packages(event.id):
        ids = store.list_package_interest_sponsor_ids(package.id)
        views.append(PackageInterestView(
            package=package_view(store, package),
            sponsors=[SponsorSummary.model_validate(s) for s in catalog.interested_sponsors(store, ids)],
        ))
    return PackageInterestListResponse(packages=views)


@router.post("/packages/{package_id}/interest", response_model=DealEnvelope, status_code=201)
def express_interest(
    package_id: int,
    request: Request,
    store: Store = Depends(get_store),
    sponsor: User = Depends(require_sponsor),
):
    deal = deal_service.express_package_interest(store, package_id, sponsor, request)
    return DealEnvelope(deal=deal_view(store, deal), message="Interest recorded; an agent will pick up this deal")


@router.delete("/packages/{package_id}/interest", response_model=MessageResponse)
def withdraw_interest(
    package_id: int,
    request: Request,
    store: Store = Depends(get_store),
    sponsor: User = Depends(require_sponsor),
):
    deal_service.withdraw_package_interest(store, package_id, sponsor, request)
    return MessageResponse(message="Interest withdrawn")
