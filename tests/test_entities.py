"""
Unit tests for domain entities and value objects.
"""
from datetime import date, datetime
from uuid import uuid4

import pytest

from domain.entities.pagination import Page, PageRequest
from domain.entities.tag import TagEntity
from domain.entities.user import UserEntity, calculate_age


class TestTagEntity:
    """Tests for TagEntity validation and copies."""

    def test_new_tag_defaults(self):
        """Test a new tag is active and not yet persisted."""
        tag = TagEntity(id=None, name="python")

        assert tag.is_new()
        assert tag.is_active
        assert tag.description is None
        assert tag.category is None

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_rejected(self, name):
        """Test empty and whitespace-only names raise ValueError."""
        with pytest.raises(ValueError):
            TagEntity(id=None, name=name)

    def test_with_changes_validates_again(self):
        """Test replacing the name with an empty one is rejected."""
        tag = TagEntity(id=uuid4(), name="python")

        with pytest.raises(ValueError):
            tag.with_changes(name="")

    def test_deactivated_keeps_other_fields(self):
        """Test soft deletion only flips the active flag."""
        tag = TagEntity(id=uuid4(), name="python", category="language")

        deactivated = tag.deactivated()

        assert not deactivated.is_active
        assert deactivated.id == tag.id
        assert deactivated.category == "language"
        assert tag.is_active


class TestUserEntity:
    """Tests for UserEntity rules."""

    def _user(self, **overrides):
        values = {
            "id": None,
            "name": "alice",
            "birth_date": date(1990, 5, 17),
            "email": "a@x.com",
            "password": "12345678",
        }
        values.update(overrides)
        return UserEntity(**values)

    @pytest.mark.parametrize(
        "email,valid",
        [
            ("a@x.com", True),
            ("first.last@mail.example.org", True),
            ("no-at-sign.com", False),
            ("a@nodot", False),
            ("with space@x.com", False),
            ("", False),
        ],
    )
    def test_email_pattern(self, email, valid):
        """Test emails must look like local@domain.tld."""
        assert self._user(email=email).has_valid_email() is valid

    def test_password_minimum_length(self):
        """Test passwords shorter than 8 characters are weak."""
        assert self._user(password="12345678").has_strong_password()
        assert not self._user(password="1234567").has_strong_password()

    def test_check_password_is_exact(self):
        """Test plaintext password comparison."""
        user = self._user()

        assert user.check_password("12345678")
        assert not user.check_password("12345679")

    def test_with_age(self):
        """Test the derived age is only set on the copy."""
        user = self._user(birth_date=date(2000, 6, 15))

        aged = user.with_age(datetime(2026, 10, 19))

        assert aged.age == 26
        assert user.age is None


class TestCalculateAge:
    """Tests for the epoch-offset age calculation."""

    def test_before_and_after_birthday(self):
        """Test age increases once the birthday has passed."""
        born = date(1990, 5, 17)

        assert calculate_age(born, datetime(2020, 5, 1)) == 29
        assert calculate_age(born, datetime(2020, 6, 1)) == 30

    def test_born_today_is_zero(self):
        """Test a birth date equal to now yields zero."""
        assert calculate_age(date(2026, 10, 19), datetime(2026, 10, 19)) == 0

    def test_far_future_birth_date_stays_in_range(self):
        """Test the latest representable birth date still yields an age."""
        assert calculate_age(date(9999, 12, 31), datetime(2026, 10, 19)) == 7973

    def test_defaults_to_current_time(self):
        """Test age is computed against now when no reference time is given."""
        assert calculate_age(date.today()) == 0


class TestPagination:
    """Tests for PageRequest and Page."""

    def test_offset_and_limit(self):
        """Test offset is derived from the 1-based page number."""
        request = PageRequest(page=3, page_size=25)

        assert request.offset == 50
        assert request.limit == 25

    @pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (-1, 10)])
    def test_invalid_window_rejected(self, page, page_size):
        """Test page and page size must be at least 1."""
        with pytest.raises(ValueError):
            PageRequest(page=page, page_size=page_size)

    def test_build_computes_total_pages(self):
        """Test total_pages is the ceiling of total over page size."""
        page = Page.build(["a"] * 5, 15, PageRequest(page=2, page_size=10))

        assert page.total_pages == 2
        assert page.current_page == 2
        assert not page.has_next
        assert page.has_previous

    def test_empty_page(self):
        """Test an empty result has zero pages."""
        page = Page.empty(PageRequest())

        assert page.items == []
        assert page.total == 0
        assert page.total_pages == 0
        assert not page.has_next

