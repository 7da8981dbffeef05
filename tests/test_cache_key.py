"""Tests for catalog cache key generation."""

from storefront_cachex.keys import by_category_query
from storefront_cachex.keys import categories_query
from storefront_cachex.keys import get_by_id_query
from storefront_cachex.keys import list_all_query
from storefront_cachex.keys import search_query
from storefront_cachex.keys import serialize_params
from storefront_cachex.types import Operation


class TestCacheKeyGeneration:
    def test_list_all_key_matches_storefront_format(self):
        query = list_all_query(limit=15, skip=0)

        assert query.key == 'products-all-{"limit":15,"skip":0}'
        assert query.operation is Operation.LIST_ALL

    def test_list_all_without_params(self):
        assert list_all_query().key == "products-all-{}"

    def test_list_all_key_ignores_argument_order(self):
        assert (
            serialize_params({"skip": 0, "limit": 15})
            == serialize_params({"limit": 15, "skip": 0})
        )

    def test_list_all_key_includes_category(self):
        key = list_all_query(limit=15, skip=0, category="Elektronik").key

        assert key == 'products-all-{"category":"Elektronik","limit":15,"skip":0}'

    def test_distinct_params_give_distinct_keys(self):
        assert list_all_query(limit=15, skip=0).key != list_all_query(limit=15, skip=15).key

    def test_detail_key(self):
        assert get_by_id_query(7).key == "product-7"
        assert get_by_id_query("7").key == "product-7"
        assert get_by_id_query(7).operation is Operation.GET_BY_ID

    def test_categories_key(self):
        query = categories_query()

        assert query.key == "categories"
        assert query.operation is Operation.CATEGORIES

    def test_by_category_key_keeps_display_name(self):
        query = by_category_query("Takı ve Mücevher")

        assert query.key == "products-category-Takı ve Mücevher"
        assert query.operation is Operation.BY_CATEGORY

    def test_search_key_is_case_and_whitespace_insensitive(self):
        assert search_query("  LAP ").key == search_query("lap").key
        assert search_query("lap").key == 'products-search-{"q":"lap"}'

    def test_search_uses_list_all_ttl_class(self):
        assert search_query("lap").operation is Operation.LIST_ALL
