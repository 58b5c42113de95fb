"""Tests for the transaction primitive and the repositories it wraps."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine

from tenantguard.core import db
from tenantguard.core.errors import StoreUnavailable, TenantAlreadyExists, UserAlreadyExists
from tenantguard.core.roles import Role
from tenantguard.repositories import tenant_repository, user_repo


class TestTransaction:
    def test_commits_on_clean_exit(self, row_counts) -> None:
        with db.transaction() as session:
            tenant_repository.create_tenant(session, name="Acme", email="acme@co")
        assert row_counts() == (1, 0)

    def test_rolls_back_on_error(self, row_counts) -> None:
        with pytest.raises(RuntimeError):
            with db.transaction() as session:
                tenant_repository.create_tenant(session, name="Acme", email="acme@co")
                raise RuntimeError("boom")
        assert row_counts() == (0, 0)

    def test_connectivity_failure_is_store_unavailable(self, tmp_path: Path) -> None:
        db.bind_engine(create_engine(f"sqlite+pysqlite:///{tmp_path}/missing/dir/store.db"))
        with pytest.raises(StoreUnavailable) as exc_info:
            with db.transaction() as session:
                tenant_repository.find_tenant_by_email(session, "acme@co")
        assert "missing" not in exc_info.value.message


class TestRepositories:
    def test_tenant_lookup_by_email_and_id(self) -> None:
        with db.transaction() as session:
            tenant = tenant_repository.create_tenant(session, name="Acme", email="acme@co")
            tid = str(tenant.id)
        with db.transaction() as session:
            assert tenant_repository.find_tenant_by_email(session, "acme@co").name == "Acme"
            assert tenant_repository.find_tenant_by_id(session, tid).email == "acme@co"
            assert tenant_repository.find_tenant_by_email(session, "other@co") is None
            assert tenant_repository.find_tenant_by_id(session, "not-an-id") is None

    def test_duplicate_tenant_email_violates_constraint(self, row_counts) -> None:
        with db.transaction() as session:
            tenant_repository.create_tenant(session, name="Acme", email="acme@co")
        with pytest.raises(TenantAlreadyExists):
            with db.transaction() as session:
                tenant_repository.create_tenant(session, name="Acme 2", email="acme@co")
        assert row_counts() == (1, 0)

    def test_duplicate_user_email_violates_constraint(self) -> None:
        with db.transaction() as session:
            a = tenant_repository.create_tenant(session, name="A", email="a@co")
            b = tenant_repository.create_tenant(session, name="B", email="b@co")
            user_repo.create_user(
                session, name="Al", email="al@co", password_hash="h", role=Role.ADMIN, tenant_id=a.id
            )
            a_id, b_id = a.id, b.id
        with pytest.raises(UserAlreadyExists):
            with db.transaction() as session:
                user_repo.create_user(
                    session, name="Al", email="al@co", password_hash="h", role=Role.USER, tenant_id=b_id
                )
        with db.transaction() as session:
            assert [u.tenant_id for u in user_repo.list_users_by_tenant(session, a_id)] == [a_id]
            assert user_repo.list_users_by_tenant(session, b_id) == []

    def test_tenant_id_cannot_be_reassigned(self) -> None:
        with db.transaction() as session:
            a = tenant_repository.create_tenant(session, name="A", email="a@co")
            b = tenant_repository.create_tenant(session, name="B", email="b@co")
            user = user_repo.create_user(
                session, name="Al", email="al@co", password_hash="h", role=Role.USER, tenant_id=a.id
            )
            with pytest.raises(ValueError):
                user.tenant_id = b.id

    def test_bulk_delete_users_then_tenants(self, row_counts) -> None:
        with db.transaction() as session:
            a = tenant_repository.create_tenant(session, name="A", email="a@co")
            user_repo.create_user(
                session, name="Al", email="al@co", password_hash="h", role=Role.ADMIN, tenant_id=a.id
            )
        with db.transaction() as session:
            assert user_repo.delete_all_users(session) == 1
            assert tenant_repository.delete_all_tenants(session) == 1
        assert row_counts() == (0, 0)
