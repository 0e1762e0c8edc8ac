# ==============================================================================
# VIEW BUILDER TESTS
# ==============================================================================
# Tests for filtered and paginated order listings
# ==============================================================================

import pytest

from conftest import make_transaction
from order_desk.core.exceptions import ValidationError
from order_desk.services.view_builder import (
    ViewQuery,
    apply_query,
    build_view,
    filter_user_summaries,
)
from order_desk.services.aggregation import compute_user_summaries


@pytest.fixture
def orders():
    return [
        make_transaction("t1", minutes=1, status="pending"),
        make_transaction(
            "t2",
            owner_id="user_2",
            minutes=2,
            status="completed",
            username="Bob",
            email="bob@example.com",
            phone="555-0100",
            payment_identifier="bob@okaxis",
        ),
        make_transaction("t3", minutes=3, status="pending"),
        make_transaction("t4", minutes=4, status="rejected"),
        make_transaction("t5", minutes=5, status="pending"),
    ]


class TestBuildView:
    """Tests for filtering, ordering and slicing."""

    def test_newest_first(self, orders):
        view = build_view(orders, page_size=10)

        assert [t.id for t in view.items] == ["t5", "t4", "t3", "t2", "t1"]
        assert view.total_count == 5
        assert view.page_count == 1

    def test_pagination(self, orders):
        view = build_view(orders, page=1, page_size=2)

        assert [t.id for t in view.items] == ["t3", "t2"]
        assert view.page == 1
        assert view.page_count == 3

    def test_page_past_end_is_clamped(self, orders):
        view = build_view(orders, page=9, page_size=2)

        assert view.page == 2
        assert [t.id for t in view.items] == ["t1"]

    def test_status_filter(self, orders):
        view = build_view(orders, status_filter="pending", page_size=10)

        assert [t.id for t in view.items] == ["t5", "t3", "t1"]

    def test_status_filter_all_is_case_insensitive(self, orders):
        assert build_view(orders, status_filter="all").total_count == 5
        assert build_view(orders, status_filter=None).total_count == 5

    def test_unknown_status_filter_is_rejected(self, orders):
        with pytest.raises(ValidationError):
            build_view(orders, status_filter="shipped")

    @pytest.mark.parametrize("needle", ["BOB", "bob@ex", "555-01", "okaxis"])
    def test_text_filter_matches_contact_and_payment_fields(self, orders, needle):
        view = build_view(orders, filter_text=needle)

        assert [t.id for t in view.items] == ["t2"]

    def test_filters_combine(self, orders):
        view = build_view(orders, filter_text="alice", status_filter="pending")

        assert view.total_count == 3

    def test_empty_result(self, orders):
        view = build_view(orders, filter_text="nobody")

        assert view.items == []
        assert view.total_count == 0
        assert view.page_count == 0
        assert view.page == 0

    def test_page_size_must_be_positive(self, orders):
        with pytest.raises(ValidationError):
            build_view(orders, page_size=0)

    def test_missing_contact_fields_do_not_match(self):
        order = make_transaction(username=None, email=None, phone=None)

        assert build_view([order], filter_text="alice@example").total_count == 0


class TestViewQuery:
    """Tests for listing state changes."""

    def test_filter_change_resets_page(self):
        query = ViewQuery(page=3, page_size=5)

        refined = query.refine(filter_text="bob")

        assert refined.page == 0
        assert refined.filter_text == "bob"

    def test_status_change_resets_page(self):
        query = ViewQuery(page=2, page_size=5)

        assert query.refine(status_filter="pending").page == 0

    def test_page_change_keeps_filters(self):
        query = ViewQuery(filter_text="bob", page_size=5)

        refined = query.refine(page=4)

        assert refined.page == 4
        assert refined.filter_text == "bob"

    def test_apply_query(self, orders):
        query = ViewQuery(status_filter="pending", page_size=2).refine(page=1)

        view = apply_query(orders, query)

        assert [t.id for t in view.items] == ["t1"]


class TestUserDirectorySearch:
    """Tests for user summary filtering."""

    def test_matches_username_email_or_phone(self, orders):
        summaries = compute_user_summaries(orders).values()

        assert [s.owner_id for s in filter_user_summaries(summaries, "555")] == ["user_2"]
        assert len(filter_user_summaries(summaries, "")) == 2
        assert filter_user_summaries(summaries, "okaxis") == []


class TestPaginationOverManyItems:
    """Tests for page arithmetic on a larger listing."""

    def test_twenty_five_items(self):
        orders = [make_transaction(f"t{i:02d}", minutes=i) for i in range(25)]

        first = build_view(orders, "", "All", page=0, page_size=10)
        last = build_view(orders, "", "All", page=2, page_size=10)

        assert len(first.items) == 10
        assert first.page_count == 3
        assert len(last.items) == 5
        assert last.items[-1].id == "t00"
