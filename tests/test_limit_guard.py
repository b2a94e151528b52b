"""
Tests for the limit guard dependency.

The guard is called directly with a constructed request and auth, the
way FastAPI would after resolving its sub-dependencies.
"""

from uuid import uuid4

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from workspace_access.api.dependencies.auth import RequestAuth
from workspace_access.api.dependencies.limits import LimitContext, create_limit_guard
from workspace_access.limits import BrandNotFoundError, LimitKeys, LimitService
from workspace_access.models.subscription import SubscriptionPlan


def _request() -> Request:
    return Request({
        "type": "http",
        "method": "POST",
        "path": "/",
        "headers": [],
        "query_string": b"",
    })


class ExplodingLimitService:
    async def check_limit(self, *args, **kwargs):
        raise RuntimeError("database unavailable")


@pytest.mark.asyncio
async def test_exceeded_maps_to_403(db, workspace_factory, test_user, test_workspace):
    await workspace_factory.add_brand(test_workspace)
    guard = create_limit_guard(LimitKeys.BRAND_MAX_COUNT)

    with pytest.raises(HTTPException) as exc_info:
        await guard(
            _request(),
            auth=RequestAuth(user=test_user, workspace_id=test_workspace.id),
            limit_service=LimitService(db),
        )

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail["code"] == "LIMIT_EXCEEDED"
    details = exc_info.value.detail["details"]
    assert details["limitKey"] == "brand.maxCount"
    assert details["limit"] == 1
    assert details["current"] == 1
    assert details["requestedAmount"] == 1


@pytest.mark.asyncio
async def test_allowed_passes_through(db, test_user, test_workspace):
    guard = create_limit_guard(LimitKeys.BRAND_MAX_COUNT)

    result = await guard(
        _request(),
        auth=RequestAuth(user=test_user, workspace_id=test_workspace.id),
        limit_service=LimitService(db),
    )

    assert result is None


@pytest.mark.asyncio
async def test_unsupported_key_maps_to_501(db, test_user, test_workspace):
    guard = create_limit_guard("brand.hologram.maxCount")

    with pytest.raises(HTTPException) as exc_info:
        await guard(
            _request(),
            auth=RequestAuth(user=test_user, workspace_id=test_workspace.id),
            limit_service=LimitService(db),
        )

    assert exc_info.value.status_code == 501
    assert exc_info.value.detail["code"] == "LIMIT_NOT_IMPLEMENTED"


@pytest.mark.asyncio
async def test_missing_brand_maps_to_404(db, test_user, test_workspace):
    guard = create_limit_guard(LimitKeys.BRAND_SOCIAL_ACCOUNT_MAX_COUNT)

    with pytest.raises(HTTPException) as exc_info:
        await guard(
            _request(),
            auth=RequestAuth(user=test_user, workspace_id=test_workspace.id, brand_id=uuid4()),
            limit_service=LimitService(db),
        )

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail["code"] == "BRAND_NOT_FOUND"


@pytest.mark.asyncio
async def test_other_errors_propagate(test_user, test_workspace):
    guard = create_limit_guard(LimitKeys.BRAND_MAX_COUNT)

    with pytest.raises(RuntimeError, match="database unavailable"):
        await guard(
            _request(),
            auth=RequestAuth(user=test_user, workspace_id=test_workspace.id),
            limit_service=ExplodingLimitService(),
        )


@pytest.mark.asyncio
async def test_async_context_resolver_overrides_request(db, workspace_factory, test_user, test_workspace):
    await workspace_factory.add_brand(test_workspace)

    async def resolve(request: Request) -> LimitContext:
        return LimitContext(plan_override=SubscriptionPlan.PRO, amount=2)

    guard = create_limit_guard(LimitKeys.BRAND_MAX_COUNT, resolve)

    await guard(
        _request(),
        auth=RequestAuth(user=test_user, workspace_id=test_workspace.id),
        limit_service=LimitService(db),
    )


@pytest.mark.asyncio
async def test_sync_context_resolver_supplies_current(db, test_user, test_workspace):
    guard = create_limit_guard(
        LimitKeys.BRAND_MAX_COUNT,
        lambda request: LimitContext(current=1),
    )

    with pytest.raises(HTTPException) as exc_info:
        await guard(
            _request(),
            auth=RequestAuth(user=test_user, workspace_id=test_workspace.id),
            limit_service=LimitService(db),
        )

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_resolver_brand_not_found_maps_to_404(db, test_user, test_workspace):
    def resolve(request: Request) -> LimitContext:
        raise BrandNotFoundError(uuid4())

    guard = create_limit_guard(LimitKeys.BRAND_SOCIAL_ACCOUNT_MAX_COUNT, resolve)

    with pytest.raises(HTTPException) as exc_info:
        await guard(
            _request(),
            auth=RequestAuth(user=test_user, workspace_id=test_workspace.id),
            limit_service=LimitService(db),
        )

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail["code"] == "BRAND_NOT_FOUND"


@pytest.mark.asyncio
async def test_resolver_other_errors_propagate(db, test_user, test_workspace):
    async def resolve(request: Request) -> LimitContext:
        raise KeyError("brand_id")

    guard = create_limit_guard(LimitKeys.BRAND_MAX_COUNT, resolve)

    with pytest.raises(KeyError):
        await guard(
            _request(),
            auth=RequestAuth(user=test_user, workspace_id=test_workspace.id),
            limit_service=LimitService(db),
        )


@pytest.mark.asyncio
async def test_resolver_may_return_mapping(db, workspace_factory, test_user, test_workspace):
    await workspace_factory.add_brand(test_workspace)
    guard = create_limit_guard(
        LimitKeys.BRAND_MAX_COUNT,
        lambda request: {"planOverride": "PRO", "amount": 2},
    )

    await guard(
        _request(),
        auth=RequestAuth(user=test_user, workspace_id=test_workspace.id),
        limit_service=LimitService(db),
    )

    guard = create_limit_guard(
        LimitKeys.BRAND_MAX_COUNT,
        lambda request: {"current": 1, "workspaceId": str(test_workspace.id)},
    )

    with pytest.raises(HTTPException) as exc_info:
        await guard(
            _request(),
            auth=RequestAuth(user=test_user, workspace_id=None),
            limit_service=LimitService(db),
        )

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail["details"]["current"] == 1
    assert exc_info.value.detail["details"]["plan"] == "FREE"
