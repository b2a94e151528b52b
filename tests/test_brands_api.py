"""
Tests for brand endpoints and usage reporting.
"""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from workspace_access.models.subscription import SubscriptionPlan
from workspace_access.models.workspace import WorkspaceRole


@pytest.mark.asyncio
async def test_free_plan_allows_one_brand(client: AsyncClient, test_workspace, auth_headers):
    url = f"/api/workspaces/{test_workspace.id}/brands"

    response = await client.post(url, headers=auth_headers, json={"name": "First"})
    assert response.status_code == 201
    assert response.json()["workspace_id"] == str(test_workspace.id)

    response = await client.post(url, headers=auth_headers, json={"name": "Second"})
    assert response.status_code == 403
    detail = response.json()["detail"]
    assert detail["code"] == "LIMIT_EXCEEDED"
    assert detail["details"]["limitKey"] == "brand.maxCount"
    assert detail["details"]["limit"] == 1
    assert detail["details"]["current"] == 1
    assert detail["details"]["requestedAmount"] == 1


@pytest.mark.asyncio
async def test_pro_plan_allows_more_brands(client: AsyncClient, workspace_factory, test_workspace, auth_headers):
    await workspace_factory.set_plan(test_workspace, SubscriptionPlan.PRO)
    url = f"/api/workspaces/{test_workspace.id}/brands"

    for name in ("One", "Two", "Three"):
        response = await client.post(url, headers=auth_headers, json={"name": name})
        assert response.status_code == 201


@pytest.mark.asyncio
async def test_brand_create_requires_permission(
    client: AsyncClient, user_factory, workspace_factory, make_auth_headers, test_workspace,
):
    admin = await user_factory.create()
    await workspace_factory.add_member(test_workspace, admin, WorkspaceRole.ADMIN)

    response = await client.post(
        f"/api/workspaces/{test_workspace.id}/brands",
        headers=make_auth_headers(admin),
        json={"name": "Nope"},
    )

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_social_account_limit(client: AsyncClient, workspace_factory, test_workspace, auth_headers):
    brand = await workspace_factory.add_brand(test_workspace)
    url = f"/api/workspaces/{test_workspace.id}/brands/{brand.id}/social-accounts"

    response = await client.post(url, headers=auth_headers, json={"platform": "instagram", "handle": "@a"})
    assert response.status_code == 201

    response = await client.post(url, headers=auth_headers, json={"platform": "facebook", "handle": "@a"})
    assert response.status_code == 403
    assert response.json()["detail"]["details"]["limitKey"] == "brand.socialAccount.maxCount"


@pytest.mark.asyncio
async def test_unknown_brand_is_404(client: AsyncClient, test_workspace, auth_headers):
    response = await client.post(
        f"/api/workspaces/{test_workspace.id}/brands/{uuid4()}/contents",
        headers=auth_headers,
        json={"title": "Hello"},
    )

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "BRAND_NOT_FOUND"


@pytest.mark.asyncio
async def test_content_create(client: AsyncClient, workspace_factory, test_workspace, auth_headers):
    brand = await workspace_factory.add_brand(test_workspace)

    response = await client.post(
        f"/api/workspaces/{test_workspace.id}/brands/{brand.id}/contents",
        headers=auth_headers,
        json={"title": "Launch post"},
    )

    assert response.status_code == 201
    assert response.json()["title"] == "Launch post"


@pytest.mark.asyncio
async def test_usage_report(client: AsyncClient, workspace_factory, test_workspace, auth_headers):
    await workspace_factory.add_brand(test_workspace)

    response = await client.get(
        f"/api/workspaces/{test_workspace.id}/usage",
        headers=auth_headers,
        params={"limitKey": "brand.maxCount"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "limitKey": "brand.maxCount",
        "plan": "FREE",
        "scope": "workspace",
        "scopeId": str(test_workspace.id),
        "current": 1,
        "limit": 1,
        "remaining": 0,
        "isUnlimited": False,
    }


@pytest.mark.asyncio
async def test_usage_report_unlimited(client: AsyncClient, workspace_factory, test_workspace, auth_headers):
    await workspace_factory.set_plan(test_workspace, SubscriptionPlan.ENTERPRISE)

    response = await client.get(
        f"/api/workspaces/{test_workspace.id}/usage",
        headers=auth_headers,
        params={"limitKey": "workspace.member.maxCount"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["isUnlimited"] is True
    assert data["limit"] is None
    assert data["remaining"] is None
    assert data["current"] == 1


@pytest.mark.asyncio
async def test_usage_report_validation(client: AsyncClient, test_workspace, auth_headers):
    url = f"/api/workspaces/{test_workspace.id}/usage"

    response = await client.get(url, headers=auth_headers, params={"limitKey": "nope"})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "INVALID_LIMIT_KEY"

    response = await client.get(url, headers=auth_headers, params={"limitKey": "brand.socialAccount.maxCount"})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "BRAND_ID_REQUIRED"

    response = await client.get(
        url,
        headers=auth_headers,
        params={"limitKey": "brand.socialAccount.maxCount", "brandId": str(uuid4())},
    )
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "BRAND_NOT_FOUND"
