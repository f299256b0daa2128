"""Tests for the generic per-model delegate."""

from __future__ import annotations

from decimal import Decimal

import pytest

from portfolio_cms.data.crud.delegates import (
    EmployeeProfileDelegate,
    NewsletterDelegate,
    ProjectDelegate,
    SiteSettingsDelegate,
    TagDelegate,
)
from portfolio_cms.data.models import ProjectCategory, ProjectStatus, UserRole
from portfolio_cms.errors import ConflictError, NotFoundError, ValidationError


class TestReads:
    def test_find_unique_by_unique_column(self, session):
        tags = TagDelegate(session)
        created = tags.create(name="Timber", slug="timber")

        assert tags.find_unique(slug="timber").id == created.id
        assert tags.find_unique(id=created.id).name == "Timber"
        assert tags.find_unique(slug="steel") is None

    def test_find_unique_rejects_non_unique_keys(self, session):
        with pytest.raises(ValidationError):
            ProjectDelegate(session).find_unique(status=ProjectStatus.DRAFT)

    def test_find_unique_or_raise(self, session):
        with pytest.raises(NotFoundError):
            TagDelegate(session).find_unique_or_raise(slug="missing")

    def test_unknown_field_is_rejected(self, session):
        with pytest.raises(ValidationError):
            TagDelegate(session).find_many({"colour": "red"})

    def test_find_many_orders_and_paginates(self, session):
        tags = TagDelegate(session)
        for name in ("beta", "alpha", "gamma", "delta"):
            tags.create(name=name, slug=name)

        ascending = [t.name for t in tags.find_many(order_by="name")]
        assert ascending == ["alpha", "beta", "delta", "gamma"]

        page = tags.find_many(order_by="-name", skip=1, take=2)
        assert [t.name for t in page] == ["delta", "beta"]

    def test_find_first(self, session):
        tags = TagDelegate(session)
        tags.create(name="b", slug="b")
        tags.create(name="a", slug="a")

        assert tags.find_first(order_by="name").name == "a"
        assert tags.find_first({"slug": "zzz"}) is None

    def test_count_with_in_and_null_filters(self, session, make_project):
        make_project(status=ProjectStatus.DRAFT, featured_order=1)
        make_project(status=ProjectStatus.PUBLISHED)
        make_project(status=ProjectStatus.ARCHIVED)
        projects = ProjectDelegate(session)

        assert projects.count() == 3
        assert projects.count(status=[ProjectStatus.DRAFT, ProjectStatus.ARCHIVED]) == 2
        assert projects.count(featured_order=None) == 2


class TestWrites:
    def test_create_duplicate_raises_conflict(self, session):
        tags = TagDelegate(session)
        tags.create(name="Glass", slug="glass")
        session.commit()

        with pytest.raises(ConflictError):
            tags.create(name="Glass", slug="glass-2")
        session.rollback()

    def test_conflict_leaves_rollback_to_session_owner(self, session):
        tags = TagDelegate(session)
        tags.create(name="Glass", slug="glass")
        session.commit()
        tags.create(name="Stone", slug="stone")

        with pytest.raises(ConflictError):
            tags.create(name="Glass", slug="glass-2")

        assert not session.is_active
        session.rollback()
        assert [tag.name for tag in tags.find_many()] == ["Glass"]

    def test_create_unknown_field(self, session):
        with pytest.raises(ValidationError):
            TagDelegate(session).create(name="x", slug="x", colour="red")

    def test_create_many_skips_duplicates(self, session):
        subscriptions = NewsletterDelegate(session)
        subscriptions.create(email="a@example.com")

        inserted = subscriptions.create_many(
            [
                {"email": "a@example.com"},
                {"email": "b@example.com"},
                {"email": "b@example.com"},
                {"email": "c@example.com"},
            ],
            skip_duplicates=True,
        )

        assert inserted == 2
        assert subscriptions.count() == 3

    def test_update_single_row(self, session):
        tags = TagDelegate(session)
        tag = tags.create(name="Old", slug="old")

        updated = tags.update({"id": tag.id}, name="New")

        assert updated.name == "New"
        with pytest.raises(NotFoundError):
            tags.update({"slug": "missing"}, name="x")

    def test_update_many_returns_count(self, session):
        subscriptions = NewsletterDelegate(session)
        for address in ("a@example.com", "b@example.com", "c@example.com"):
            subscriptions.create(email=address)

        affected = subscriptions.update_many(
            {"email": ["a@example.com", "b@example.com"]}, is_active=False
        )

        assert affected == 2
        assert subscriptions.count(is_active=False) == 2

    def test_upsert_creates_then_updates(self, session):
        settings = SiteSettingsDelegate(session)

        created = settings.upsert(
            {"key": "site.title"},
            create_data={"value": "Studio"},
            update_data={"value": "Studio"},
        )
        updated = settings.upsert(
            {"key": "site.title"},
            create_data={"value": "ignored"},
            update_data={"value": "Atelier"},
        )

        assert created.id == updated.id
        assert updated.value == "Atelier"
        assert settings.count() == 1

    def test_delete_and_delete_many(self, session):
        tags = TagDelegate(session)
        for name in ("a", "b", "c"):
            tags.create(name=name, slug=name)

        removed = tags.delete(slug="a")
        assert removed.name == "a"
        assert tags.delete_many(slug=["b", "c"]) == 2
        assert tags.count() == 0
        with pytest.raises(NotFoundError):
            tags.delete(slug="a")


class TestAggregates:
    @pytest.fixture
    def staff(self, session, make_user):
        profiles = EmployeeProfileDelegate(session)
        rows = [
            ("E1", "Design", Decimal("50000")),
            ("E2", "Design", Decimal("70000")),
            ("E3", "Finance", Decimal("60000")),
            ("E4", "Finance", None),
        ]
        for employee_id, department, salary in rows:
            user = make_user(UserRole.EMPLOYEE)
            profiles.create(
                user_id=user.id, employee_id=employee_id, department=department, salary=salary
            )
        return profiles

    def test_aggregate(self, staff):
        result = staff.aggregate(
            count=True, sum_of=["salary"], avg_of=["salary"], min_of=["salary"], max_of=["salary"]
        )

        assert result["_count"] == 4
        assert result["_sum"]["salary"] == Decimal("180000")
        assert result["_avg"]["salary"] == pytest.approx(60000.0)
        assert result["_min"]["salary"] == Decimal("50000")
        assert result["_max"]["salary"] == Decimal("70000")

    def test_aggregate_with_filter_and_field_counts(self, staff):
        result = staff.aggregate({"department": "Finance"}, count=["salary"])

        assert result["_count"] == {"salary": 1}

    def test_aggregate_rejects_non_numeric_sum(self, staff):
        with pytest.raises(ValidationError):
            staff.aggregate(sum_of=["department"])

    def test_aggregate_requires_a_field(self, staff):
        with pytest.raises(ValidationError):
            staff.aggregate()

    def test_group_by(self, staff):
        groups = staff.group_by(
            ["department"], sum_of=["salary"], order_by="department"
        )

        assert [g["department"] for g in groups] == ["Design", "Finance"]
        assert groups[0]["_count"] == 2
        assert groups[0]["_sum"]["salary"] == Decimal("120000")
        assert groups[1]["_sum"]["salary"] == Decimal("60000")

    def test_group_by_orders_by_count(self, session, make_project):
        for category in (
            ProjectCategory.COMMERCIAL,
            ProjectCategory.INTERIOR,
            ProjectCategory.INTERIOR,
        ):
            make_project(category=category)

        groups = ProjectDelegate(session).group_by(["category"], order_by="-_count", take=1)

        assert groups == [{"category": ProjectCategory.INTERIOR, "_count": 2}]

    def test_group_by_rejects_unknown_order(self, staff):
        with pytest.raises(ValidationError):
            staff.group_by(["department"], order_by="salary")
