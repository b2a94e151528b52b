"""
Tests for workspace, member and role endpoints.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from workspace_access.models.subscription import SubscriptionPlan, SubscriptionStatus
from workspace_access.models.workspace import Workspace, WorkspaceMember, WorkspaceRole
from workspace_access.rbac import DEFAULT_PERMISSION_REGISTRY, RoleProvisioner, Permissions
from workspace_access.schemas.workspace import WorkspaceCreate
from workspace_access.services.workspace import WorkspaceService


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_requires_authentication(client: AsyncClient, test_workspace):
    response = await client.get(f"/api/workspaces/{test_workspace.id}")

    assert response.status_code == 401

    response = await client.get(
        f"/api/workspaces/{test_workspace.id}",
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_workspace(client: AsyncClient, db, test_user, auth_headers):
    response = await client.post(
        "/api/workspaces",
        headers=auth_headers,
        json={"name": "Acme", "slug": "acme"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "acme"

    member = (await db.execute(
        select(WorkspaceMember).where(WorkspaceMember.user_id == test_user.id)
    )).scalar_one()
    assert member.role == WorkspaceRole.OWNER
    assert member.role_id is not None

    subscription = await WorkspaceService(db).get_subscription(member.workspace_id)
    assert subscription.plan == SubscriptionPlan.FREE
    assert subscription.status == SubscriptionStatus.ACTIVE

    roles = await client.get(f"/api/workspaces/{data['id']}/roles", headers=auth_headers)
    assert roles.status_code == 200
    assert [r["key"] for r in roles.json()] == ["workspace-owner", "workspace-admin", "workspace-member"]
    assert roles.json()[0]["permissions"] == list(DEFAULT_PERMISSION_REGISTRY.get_all_permission_keys())


@pytest.mark.asyncio
async def test_second_free_workspace_is_limited(client: AsyncClient, test_workspace, auth_headers):
    response = await client.post(
        "/api/workspaces",
        headers=auth_headers,
        json={"name": "Second", "slug": "second"},
    )

    assert response.status_code == 403
    detail = response.json()["detail"]
    assert detail["code"] == "LIMIT_EXCEEDED"
    assert detail["details"]["limitKey"] == "workspace.maxCount"
    assert detail["details"]["current"] == 1


@pytest.mark.asyncio
async def test_duplicate_slug_conflicts(client: AsyncClient, user_factory, make_auth_headers, test_workspace):
    other = await user_factory.create()

    response = await client.post(
        "/api/workspaces",
        headers=make_auth_headers(other),
        json={"name": "Dup", "slug": test_workspace.slug},
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_workspace_creation_is_atomic(db, test_user, monkeypatch):
    user_id = test_user.id

    async def fail(self, tx, workspace_id):
        raise RuntimeError("provisioning failed")

    monkeypatch.setattr(RoleProvisioner, "ensure_default_workspace_roles", fail)

    with pytest.raises(RuntimeError):
        await WorkspaceService(db).create(WorkspaceCreate(name="Broken", slug="broken"), owner_id=user_id)
    await db.rollback()

    assert (await db.execute(select(Workspace).where(Workspace.slug == "broken"))).scalar_one_or_none() is None
    assert (await db.execute(
        select(WorkspaceMember).where(WorkspaceMember.user_id == user_id)
    )).scalar_one_or_none() is None


@pytest.mark.asyncio
async def test_get_workspace_requires_membership(
    client: AsyncClient, user_factory, make_auth_headers, test_workspace, auth_headers,
):
    response = await client.get(f"/api/workspaces/{test_workspace.id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["id"] == str(test_workspace.id)

    stranger = await user_factory.create()
    response = await client.get(f"/api/workspaces/{test_workspace.id}", headers=make_auth_headers(stranger))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_my_permissions(
    client: AsyncClient, user_factory, workspace_factory, make_auth_headers, test_workspace, auth_headers,
):
    response = await client.get(f"/api/workspaces/{test_workspace.id}/permissions/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["role"] == "OWNER"
    assert response.json()["permissions"] == list(DEFAULT_PERMISSION_REGISTRY.get_all_permission_keys())

    admin = await user_factory.create()
    await workspace_factory.add_member(test_workspace, admin, WorkspaceRole.ADMIN)
    response = await client.get(
        f"/api/workspaces/{test_workspace.id}/permissions/me",
        headers=make_auth_headers(admin),
    )
    assert response.json()["permissions"] == [
        Permissions.WORKSPACE_SETTINGS_MANAGE,
        Permissions.STUDIO_BRAND_VIEW,
        Permissions.STUDIO_CONTENT_CREATE,
        Permissions.STUDIO_CONTENT_PUBLISH,
    ]


@pytest.mark.asyncio
async def test_member_lifecycle(
    client: AsyncClient, user_factory, make_auth_headers, test_workspace, auth_headers,
):
    user = await user_factory.create()
    base = f"/api/workspaces/{test_workspace.id}/members"

    response = await client.post(base, headers=auth_headers, json={"user_id": str(user.id), "role": "MEMBER"})
    assert response.status_code == 201
    assert response.json()["role"] == "MEMBER"
    assert response.json()["role_id"] is not None

    response = await client.get(base, headers=auth_headers)
    assert sorted(m["role"] for m in response.json()) == ["MEMBER", "OWNER"]

    response = await client.patch(f"{base}/{user.id}", headers=auth_headers, json={"role": "ADMIN"})
    assert response.status_code == 200
    assert response.json()["role"] == "ADMIN"

    # Admins hold settings.manage but not members.manage
    response = await client.get(
        f"/api/workspaces/{test_workspace.id}/roles",
        headers=make_auth_headers(user),
    )
    assert response.status_code == 403

    response = await client.delete(f"{base}/{user.id}", headers=auth_headers)
    assert response.status_code == 204

    response = await client.delete(f"{base}/{user.id}", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_free_member_limit(client: AsyncClient, user_factory, test_workspace, auth_headers):
    base = f"/api/workspaces/{test_workspace.id}/members"
    first = await user_factory.create()
    second = await user_factory.create()

    response = await client.post(base, headers=auth_headers, json={"user_id": str(first.id)})
    assert response.status_code == 201

    response = await client.post(base, headers=auth_headers, json={"user_id": str(second.id)})
    assert response.status_code == 403
    assert response.json()["detail"]["details"]["limitKey"] == "workspace.member.maxCount"
    assert response.json()["detail"]["details"]["limit"] == 2


@pytest.mark.asyncio
async def test_member_cannot_manage_members(
    client: AsyncClient, user_factory, workspace_factory, make_auth_headers, test_workspace,
):
    member = await user_factory.create()
    await workspace_factory.add_member(test_workspace, member)

    response = await client.post(
        f"/api/workspaces/{test_workspace.id}/members",
        headers=make_auth_headers(member),
        json={"user_id": str((await user_factory.create()).id)},
    )

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_list_roles_backfills_missing_roles(db, test_user, workspace_factory):
    workspace = await workspace_factory.create_bare()
    db.add(WorkspaceMember(workspace_id=workspace.id, user_id=test_user.id, role=WorkspaceRole.OWNER))
    await db.flush()

    roles = await WorkspaceService(db).list_roles(workspace.id)

    assert [role.key for role in roles] == ["workspace-owner", "workspace-admin", "workspace-member"]
    assert len(roles[0].permission_keys) == len(DEFAULT_PERMISSION_REGISTRY)


@pytest.mark.asyncio
async def test_subscription_endpoint(client: AsyncClient, workspace_factory, test_workspace, auth_headers):
    await workspace_factory.set_plan(test_workspace, SubscriptionPlan.PRO)

    response = await client.get(f"/api/workspaces/{test_workspace.id}/subscription", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["plan"] == "PRO"
    assert response.json()["status"] == "ACTIVE"
