"""Tests for user administration and employee profiles."""

from __future__ import annotations

from decimal import Decimal

import pytest

from portfolio_cms.data.models import UserRole
from portfolio_cms.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from portfolio_cms.services import employee_profiles, users
from portfolio_cms.services.pagination import PageRequest


class TestUserAdministration:
    def test_list_filters_by_role_and_search(self, session, make_user):
        make_user(UserRole.CRAFTER, email="maker@example.com", name="Mira Maker")
        make_user(UserRole.CRAFTER, email="other@example.com")
        make_user(UserRole.USER, email="guest@example.com", name="Mira Guest")

        crafters = users.list_users(session, role=UserRole.CRAFTER)
        miras = users.list_users(session, search="MIRA")

        assert crafters.total == 2
        assert {u.email for u in miras.items} == {"maker@example.com", "guest@example.com"}

    def test_list_paginates(self, session, make_user):
        for _ in range(5):
            make_user()

        page = users.list_users(session, page=PageRequest(page=3, limit=2))

        assert page.total == 5
        assert page.pages == 3
        assert len(page.items) == 1

    def test_update_and_deactivate(self, session, make_user):
        user = make_user()

        users.update_user(session, user.id, {"name": "Renamed", "role": UserRole.ADMIN})
        users.deactivate_user(session, user.id)

        assert user.name == "Renamed"
        assert user.role == UserRole.USER
        assert user.is_active is False

    def test_only_super_admin_manages_super_admins(self, session, make_user):
        admin = make_user(UserRole.ADMIN)
        root = make_user(UserRole.SUPER_ADMIN)
        target = make_user()

        with pytest.raises(PermissionDeniedError):
            users.set_role(session, admin, target.id, UserRole.SUPER_ADMIN)
        with pytest.raises(PermissionDeniedError):
            users.set_role(session, admin, root.id, UserRole.USER)

        assert users.set_role(session, admin, target.id, UserRole.CRAFTER).role == UserRole.CRAFTER
        assert users.set_role(session, root, target.id, UserRole.SUPER_ADMIN).role == (
            UserRole.SUPER_ADMIN
        )

    def test_delete_missing_user(self, session):
        with pytest.raises(NotFoundError):
            users.delete_user(session, "missing")

    def test_role_counts(self, session, make_user):
        make_user(UserRole.ADMIN)
        make_user(UserRole.CRAFTER)
        make_user(UserRole.CRAFTER)

        counts = users.user_role_counts(session)

        assert counts["CRAFTER"] == 2
        assert counts["ADMIN"] == 1
        assert counts["FINANCE"] == 0
        assert set(counts) == {role.value for role in UserRole}


class TestEmployeeProfiles:
    def test_create_and_get(self, session, make_user):
        user = make_user(UserRole.EMPLOYEE)

        employee_profiles.create_profile(
            session,
            user.id,
            {"employee_id": "E-1", "department": "Design", "salary": Decimal("4200.50")},
        )
        profile = employee_profiles.get_profile(session, user.id)

        assert profile.employee_id == "E-1"
        assert profile.salary == Decimal("4200.50")
        assert profile.join_date is not None

    def test_one_profile_per_user(self, session, make_user):
        user = make_user(UserRole.EMPLOYEE)
        employee_profiles.create_profile(session, user.id, {"employee_id": "E-1"})

        with pytest.raises(ConflictError):
            employee_profiles.create_profile(session, user.id, {"employee_id": "E-2"})

    def test_employee_id_is_unique(self, session, make_user):
        employee_profiles.create_profile(session, make_user().id, {"employee_id": "E-1"})

        with pytest.raises(ConflictError):
            employee_profiles.create_profile(session, make_user().id, {"employee_id": "E-1"})

    def test_validation(self, session, make_user):
        user = make_user()

        with pytest.raises(ValidationError):
            employee_profiles.create_profile(session, user.id, {"department": "Design"})
        with pytest.raises(ValidationError):
            employee_profiles.create_profile(
                session, user.id, {"employee_id": "E-1", "salary": Decimal("-1")}
            )

    def test_update_and_delete(self, session, make_user):
        user = make_user()
        employee_profiles.create_profile(session, user.id, {"employee_id": "E-1"})

        updated = employee_profiles.update_profile(session, user.id, {"position": "Lead"})
        assert updated.position == "Lead"

        employee_profiles.delete_profile(session, user.id)
        with pytest.raises(NotFoundError):
            employee_profiles.get_profile(session, user.id)

    def test_salary_summary_and_headcount(self, session, make_user):
        rows = [
            ("E-1", "Design", Decimal("3000")),
            ("E-2", "Design", Decimal("5000")),
            ("E-3", "Site", Decimal("4000")),
        ]
        for employee_id, department, salary in rows:
            employee_profiles.create_profile(
                session,
                make_user().id,
                {"employee_id": employee_id, "department": department, "salary": salary},
            )

        design = employee_profiles.salary_summary(session, "Design")
        overall = employee_profiles.salary_summary(session)

        assert design["headcount"] == 2
        assert design["total"] == Decimal("8000")
        assert design["average"] == pytest.approx(4000.0)
        assert overall["minimum"] == Decimal("3000")
        assert overall["maximum"] == Decimal("5000")
        assert employee_profiles.department_headcount(session) == [
            {"department": "Design", "headcount": 2},
            {"department": "Site", "headcount": 1},
        ]
        assert [p.employee_id for p in employee_profiles.list_profiles(session, "Design")] == [
            "E-1",
            "E-2",
        ]
