"""Tests for tenant provisioning: atomic tenant + founding admin, uniqueness, purge."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from tenantguard.core.auth import verify_token
from tenantguard.core.errors import TenantAlreadyExists, UserAlreadyExists
from tenantguard.schemas.identity import TenantCreated
from tenantguard.services import tenant_service


def _acme() -> TenantCreated:
    return tenant_service.create_tenant(
        name="Acme",
        tenant_email="acme@co",
        admin_name="Al",
        admin_email="al@acme.co",
        admin_password="p1",
    )


class TestCreateTenant:
    def test_founding_admin_projection(self) -> None:
        created = _acme()
        assert created.role == "ADMIN"
        assert created.name == "Al"
        assert created.email == "al@acme.co"
        assert created.id
        assert created.tenant_id
        assert created.created_at is not None
        dumped = created.model_dump(by_alias=True)
        assert "password" not in dumped and "password_hash" not in dumped
        assert set(dumped) == {"id", "name", "email", "role", "tenantId", "createdAt", "accessToken"}

    def test_admin_token_round_trips(self) -> None:
        created = _acme()
        claims = verify_token(created.access_token)
        assert claims is not None
        assert claims.to_payload() == {
            "userId": created.id,
            "email": "al@acme.co",
            "name": "Al",
            "role": "ADMIN",
            "tenantId": created.tenant_id,
        }

    def test_lookup_after_create(self) -> None:
        assert tenant_service.tenant_exists("acme@co") is False
        _acme()
        assert tenant_service.tenant_exists("acme@co") is True

    def test_duplicate_tenant_email_writes_nothing(self, row_counts) -> None:
        _acme()
        assert row_counts() == (1, 1)
        with pytest.raises(TenantAlreadyExists):
            tenant_service.create_tenant("Acme 2", "acme@co", "Zed", "zed@acme.co", "p9")
        assert row_counts() == (1, 1)

    def test_admin_email_taken_writes_nothing(self, row_counts) -> None:
        _acme()
        with pytest.raises(UserAlreadyExists):
            tenant_service.create_tenant("Beta", "beta@co", "Al again", "al@acme.co", "p2")
        assert row_counts() == (1, 1)
        assert tenant_service.tenant_exists("beta@co") is False

    def test_admin_failure_rolls_back_tenant(self, monkeypatch: pytest.MonkeyPatch, row_counts) -> None:
        def _explode(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr("tenantguard.repositories.user_repo.create_user", _explode)
        with pytest.raises(RuntimeError):
            _acme()
        assert row_counts() == (0, 0)

    def test_unique_constraint_backstop(self, monkeypatch: pytest.MonkeyPatch, row_counts) -> None:
        _acme()
        # Skip the pre-check so only the unique index stands in the way.
        monkeypatch.setattr(
            "tenantguard.repositories.tenant_repository.find_tenant_by_email",
            lambda session, email: None,
        )
        with pytest.raises(TenantAlreadyExists):
            tenant_service.create_tenant("Acme 2", "acme@co", "Zed", "zed@acme.co", "p9")
        assert row_counts() == (1, 1)

    def test_concurrent_creates_single_winner(self, row_counts) -> None:
        def attempt(i: int) -> object:
            try:
                return tenant_service.create_tenant(
                    "Race", "race@co", f"Admin {i}", f"admin{i}@race.co", "pw"
                )
            except TenantAlreadyExists as exc:
                return exc

        with ThreadPoolExecutor(max_workers=6) as pool:
            results = list(pool.map(attempt, range(6)))

        winners = [r for r in results if isinstance(r, TenantCreated)]
        losers = [r for r in results if isinstance(r, TenantAlreadyExists)]
        assert len(winners) == 1
        assert len(losers) == 5
        assert row_counts() == (1, 1)


class TestDeleteAllTenants:
    def test_removes_everything(self, row_counts) -> None:
        _acme()
        tenant_service.create_tenant("Beta", "beta@co", "Bea", "bea@beta.co", "p3")
        assert row_counts() == (2, 2)
        tenant_service.delete_all_tenants()
        assert row_counts() == (0, 0)

    def test_empty_store_is_fine(self, row_counts) -> None:
        tenant_service.delete_all_tenants()
        assert row_counts() == (0, 0)

    def test_emails_reusable_after_purge(self) -> None:
        _acme()
        tenant_service.delete_all_tenants()
        assert _acme().role == "ADMIN"
