"""목록 조회 조건/페이지네이션 테스트."""
import pytest

from repositories.apartment_query import build_listing_query, build_pagination, is_default_listing
from schemas.apartment import ApartmentFilters


class TestPagination:

    def test_middle_page(self):
        """25건, 페이지당 10건, 2페이지."""
        meta = build_pagination(page=2, limit=10, total=25)
        assert meta.total_pages == 3
        assert meta.has_next is True
        assert meta.has_prev is True

    def test_last_page(self):
        meta = build_pagination(page=3, limit=10, total=25)
        assert meta.total_pages == 3
        assert meta.has_next is False
        assert meta.has_prev is True

    def test_empty_result(self):
        meta = build_pagination(page=1, limit=10, total=0)
        assert meta.total_pages == 0
        assert meta.has_next is False
        assert meta.has_prev is False

    def test_serialized_with_camel_case(self):
        meta = build_pagination(page=1, limit=10, total=25)
        assert meta.model_dump(by_alias=True) == {
            "page": 1,
            "limit": 10,
            "total": 25,
            "totalPages": 3,
            "hasNext": True,
            "hasPrev": False,
        }


class TestDefaultListing:

    def test_empty_filters_are_default(self):
        assert is_default_listing(ApartmentFilters()) is True

    def test_page_and_sort_only_is_default(self):
        filters = ApartmentFilters(page=3, limit=25, sortBy="price", sortOrder="asc")
        assert is_default_listing(filters) is True

    @pytest.mark.parametrize("field,value", [
        ("search", "marina"),
        ("minPrice", 0),
        ("maxArea", 1000),
        ("bedrooms", [2]),
        ("locations", ["Dubai Marina"]),
        ("amenities", ["Gym"]),
        ("isAvailable", False),
    ])
    def test_any_filter_is_not_default(self, field, value):
        filters = ApartmentFilters(**{field: value})
        assert is_default_listing(filters) is False

    def test_empty_lists_are_ignored(self):
        assert is_default_listing(ApartmentFilters(bedrooms=[], amenities=[])) is True


class TestBuildListingQuery:

    def test_offset_and_limit(self):
        query = build_listing_query(ApartmentFilters(page=3, limit=20))
        assert query.offset == 40
        assert query.limit == 20

    def test_availability_defaults_to_true(self):
        query = build_listing_query(ApartmentFilters())
        assert len(query.conditions) == 1
        assert "is_available" in str(query.conditions[0])

    def test_each_amenity_adds_condition(self):
        base = build_listing_query(ApartmentFilters())
        query = build_listing_query(ApartmentFilters(amenities=["Gym", "Pool", "Gym"]))
        assert len(query.conditions) == len(base.conditions) + 2

    def test_sort_appends_id_tie_breaker(self):
        query = build_listing_query(ApartmentFilters(sortBy="price", sortOrder="asc"))
        assert len(query.order_by) == 2
        assert "price" in str(query.order_by[0])
        assert "id" in str(query.order_by[1])


class TestFilterValidation:

    def test_max_price_below_min_price(self):
        with pytest.raises(ValueError):
            ApartmentFilters(minPrice=100, maxPrice=50)

    def test_limit_upper_bound(self):
        with pytest.raises(ValueError):
            ApartmentFilters(limit=101)

    def test_unknown_sort_field(self):
        with pytest.raises(ValueError):
            ApartmentFilters(sortBy="unitName")
