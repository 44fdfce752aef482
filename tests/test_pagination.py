import pytest

from app.core.exceptions import InvalidArgumentError
from app.core.pagination import Page, PageRequest


class TestPageRequest:

    def test_defaults(self):
        page_request = PageRequest()

        assert page_request.page == 0
        assert page_request.size == 5
        assert page_request.sort_order() == ("createdAt", "desc")

    def test_offset(self):
        assert PageRequest(page=3, size=4).offset == 12

    def test_direction_defaults_to_ascending(self):
        assert PageRequest(sort="id").sort_order() == ("id", "asc")

    def test_unknown_direction(self):
        with pytest.raises(InvalidArgumentError):
            PageRequest(sort="id,sideways").sort_order()


class TestPageFromList:

    def test_slices(self):
        page = Page.from_list(list(range(12)), PageRequest(page=1, size=5))

        assert page.content == [5, 6, 7, 8, 9]
        assert page.total_elements == 12
        assert page.total_pages == 3

    def test_last_partial_page(self):
        assert Page.from_list(list(range(12)), PageRequest(page=2, size=5)).content == [10, 11]

    def test_offset_past_end(self):
        page = Page.from_list([1, 2], PageRequest(page=1, size=2))

        assert page.content == []
        assert page.total_elements == 2
        assert page.total_pages == 1

    def test_empty(self):
        page = Page.from_list([], PageRequest())

        assert page.content == []
        assert page.total_pages == 0

    def test_map_keeps_metadata(self):
        page = Page.from_list([1, 2, 3], PageRequest(page=0, size=2)).map(lambda x: x * 10)

        assert page.content == [10, 20]
        assert page.total_elements == 3
