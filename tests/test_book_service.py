"""Unit tests for BookService."""

import sqlite3
from unittest.mock import MagicMock

import pytest

from book_catalog_api.app.core.errors import (
    ErrorKind,
    InvalidRequestError,
    NotFoundError,
    StorageFailureError,
)
from book_catalog_api.app.schemas.book import BookCreate, BookUpdate
from book_catalog_api.app.services.book_service import BookService, parse_book_id
from book_catalog_api.app.services.result import ServiceResult


@pytest.fixture
def failing_store() -> MagicMock:
    """A store whose transactions cannot even be opened."""
    store = MagicMock()
    store.transaction.side_effect = sqlite3.OperationalError("unable to open database file")
    return store


@pytest.fixture
def broken_session_store() -> MagicMock:
    """A store whose session fails on every query."""
    session = MagicMock()
    for name in ("create", "find_by_id", "find_all", "update", "delete", "search_by_title_or_subtitle"):
        getattr(session, name).side_effect = sqlite3.DatabaseError("disk I/O error")
    store = MagicMock()
    store.transaction.return_value.__enter__.return_value = session
    return store


class TestParseBookId:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1", 1),
            (" 42 ", 42),
            (7, 7),
            ("-3", -3),
            ("+5", 5),
            ("9223372036854775807", 2**63 - 1),
            ("-9223372036854775808", -(2**63)),
        ],
    )
    def test_parses_integers(self, raw, expected):
        assert parse_book_id(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "abc",
            "",
            "1.5",
            None,
            True,
            "12a",
            "1_0",
            "\u0661\u0662",
            "0x10",
            "9223372036854775808",
            "-9223372036854775809",
            "99999999999999999999",
            2**63,
        ],
    )
    def test_rejects_everything_else(self, raw):
        assert parse_book_id(raw) is None


class TestServiceResult:
    def test_success_unwraps(self):
        result = ServiceResult.success(5)
        assert result.ok
        assert result.unwrap() == 5

    def test_failure_unwrap_raises_carried_error(self):
        result = ServiceResult.failure(NotFoundError("gone"))
        assert not result.ok
        with pytest.raises(NotFoundError, match="gone"):
            result.unwrap()


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_normalises_status(self, service: BookService):
        result = await service.create(
            BookCreate(
                isbn="9780300267662",
                title="Why Architecture Matters",
                subtitle="A classic work...",
                copyright_year=2023,
                status="approved",
            )
        )

        book = result.unwrap()
        assert book.id is not None
        assert book.status == "APPROVED"
        assert book.subtitle == "A classic work..."
        assert book.created_at is not None
        assert book.updated_at is not None

    @pytest.mark.asyncio
    async def test_create_defaults_subtitle_to_empty(self, service: BookService):
        result = await service.create(
            BookCreate(isbn="123", title="No Subtitle", copyright_year=2000, status="PENDING")
        )

        assert result.unwrap().subtitle == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"isbn": None}, "ISBN is required"),
            ({"isbn": "   "}, "ISBN is required"),
            ({"title": ""}, "Title is required"),
            ({"copyright_year": None}, "Copyright year is required"),
            ({"status": None}, "Status is required"),
            ({"status": " "}, "Status is required"),
        ],
    )
    async def test_create_rejects_missing_fields(self, service, create_request, overrides, message):
        request = create_request.model_copy(update=overrides)

        result = await service.create(request)

        assert result.error == InvalidRequestError(message)
        assert (await service.get_all()).unwrap() == []

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_status(self, service, create_request):
        result = await service.create(create_request.model_copy(update={"status": "archived"}))

        assert isinstance(result.error, InvalidRequestError)
        assert result.error.kind is ErrorKind.INVALID_REQUEST
        assert result.error.message.startswith("Invalid status: archived")

    @pytest.mark.asyncio
    async def test_create_reports_storage_failure_generically(self, failing_store, create_request):
        result = await BookService(failing_store).create(create_request)

        assert isinstance(result.error, StorageFailureError)
        assert result.error.message == "Failed to create book"
        assert result.error.status_code == 500
        assert isinstance(result.error.cause, sqlite3.OperationalError)


class TestGetOne:
    @pytest.mark.asyncio
    async def test_get_one_returns_created_book(self, service, create_request):
        created = (await service.create(create_request)).unwrap()

        fetched = (await service.get_one(str(created.id))).unwrap()

        assert fetched == created

    @pytest.mark.asyncio
    async def test_get_one_missing_is_not_found(self, service):
        result = await service.get_one("999")

        assert result.error == NotFoundError("Book not found with id: 999")
        assert result.error.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_id", ["abc", "99999999999999999999"])
    async def test_get_one_invalid_id_is_invalid_request(self, service, raw_id):
        result = await service.get_one(raw_id)

        assert result.error == InvalidRequestError(f"Invalid book ID format: {raw_id}")
        assert result.error.status_code == 400

    @pytest.mark.asyncio
    async def test_get_one_storage_failure(self, broken_session_store):
        result = await BookService(broken_session_store).get_one("1")

        assert result.error == StorageFailureError("Failed to get book")


class TestGetAll:
    @pytest.mark.asyncio
    async def test_empty_catalog_is_empty_list(self, service):
        result = await service.get_all()

        assert result.ok
        assert result.value == []

    @pytest.mark.asyncio
    async def test_get_all_is_idempotent(self, service, create_request):
        await service.create(create_request)
        await service.create(create_request.model_copy(update={"title": "Second"}))

        first = (await service.get_all()).unwrap()
        second = (await service.get_all()).unwrap()

        assert first == second
        assert [b.title for b in first] == ["Test Book", "Second"]

    @pytest.mark.asyncio
    async def test_get_all_paginates(self, service, create_request):
        for n in range(4):
            await service.create(create_request.model_copy(update={"title": f"Book {n}"}))

        page = (await service.get_all(limit=2, offset=1)).unwrap()

        assert [b.title for b in page] == ["Book 1", "Book 2"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit, offset", [(0, 0), (-1, 0), (None, -1)])
    async def test_get_all_rejects_bad_pagination(self, service, limit, offset):
        result = await service.get_all(limit=limit, offset=offset)

        assert isinstance(result.error, InvalidRequestError)

    @pytest.mark.asyncio
    async def test_get_all_storage_failure(self, failing_store):
        result = await BookService(failing_store).get_all()

        assert result.error == StorageFailureError("Failed to get books")


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_then_get_returns_new_fields(self, service, create_request):
        created = (await service.create(create_request)).unwrap()

        updated = (
            await service.update(
                BookUpdate(
                    id=created.id,
                    isbn="978-0-123456-78-9",
                    title="Updated Book",
                    subtitle="Updated Subtitle",
                    copyright_year=2024,
                    status="APPROVED",
                )
            )
        ).unwrap()
        fetched = (await service.get_one(created.id)).unwrap()

        assert updated.title == "Updated Book"
        assert updated.status == "APPROVED"
        assert fetched == updated
        assert fetched.copyright_year == 2024
        assert fetched.created_at == created.created_at
        assert fetched.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_only_overwrites_present_fields(self, service, create_request):
        created = (await service.create(create_request)).unwrap()

        updated = (await service.update(BookUpdate(id=created.id, status="rejected"))).unwrap()

        assert updated.status == "REJECTED"
        assert updated.title == created.title
        assert updated.subtitle == created.subtitle
        assert updated.isbn == created.isbn
        assert updated.copyright_year == created.copyright_year

    @pytest.mark.asyncio
    async def test_any_status_transition_is_allowed(self, service, create_request):
        created = (await service.create(create_request.model_copy(update={"status": "REJECTED"}))).unwrap()

        updated = (await service.update(BookUpdate(id=created.id, status="APPROVED"))).unwrap()

        assert updated.status == "APPROVED"

    @pytest.mark.asyncio
    async def test_path_id_overrides_body_id(self, service, create_request):
        first = (await service.create(create_request)).unwrap()
        second = (await service.create(create_request.model_copy(update={"title": "Second"}))).unwrap()

        updated = (await service.update(BookUpdate(id=first.id, title="Via path"), book_id=str(second.id))).unwrap()

        assert updated.id == second.id
        assert (await service.get_one(first.id)).unwrap().title == "Test Book"

    @pytest.mark.asyncio
    async def test_update_missing_book_is_not_found(self, service):
        result = await service.update(BookUpdate(id=999, title="Nope"))

        assert result.error == NotFoundError("Book not found with id: 999")

    @pytest.mark.asyncio
    async def test_update_without_id_is_invalid(self, service):
        result = await service.update(BookUpdate(title="No id"))

        assert result.error == InvalidRequestError("Book ID is required")

    @pytest.mark.asyncio
    async def test_update_with_malformed_path_id_is_invalid(self, service):
        result = await service.update(BookUpdate(title="x"), book_id="abc")

        assert result.error == InvalidRequestError("Invalid book ID format: abc")

    @pytest.mark.asyncio
    async def test_update_with_out_of_range_path_id_is_invalid(self, service):
        result = await service.update(BookUpdate(title="x"), book_id="99999999999999999999")

        assert result.error == InvalidRequestError("Invalid book ID format: 99999999999999999999")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields, message",
        [
            ({"title": "  "}, "Title must not be blank"),
            ({"isbn": ""}, "ISBN must not be blank"),
        ],
    )
    async def test_update_rejects_blank_required_fields(self, service, create_request, fields, message):
        created = (await service.create(create_request)).unwrap()

        result = await service.update(BookUpdate(id=created.id, **fields))

        assert result.error == InvalidRequestError(message)
        assert (await service.get_one(created.id)).unwrap() == created

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_status(self, service, create_request):
        created = (await service.create(create_request)).unwrap()

        result = await service.update(BookUpdate(id=created.id, status="lost"))

        assert isinstance(result.error, InvalidRequestError)

    @pytest.mark.asyncio
    async def test_update_storage_failure(self, broken_session_store):
        result = await BookService(broken_session_store).update(BookUpdate(id=1, title="x"))

        assert result.error == StorageFailureError("Failed to update book")


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_is_terminal(self, service, create_request):
        created = (await service.create(create_request)).unwrap()

        deleted = await service.delete(str(created.id))
        again = await service.get_one(str(created.id))

        assert deleted.ok
        assert deleted.value is None
        assert again.error == NotFoundError(f"Book not found with id: {created.id}")

    @pytest.mark.asyncio
    async def test_delete_missing_is_not_found(self, service):
        result = await service.delete("999")

        assert result.error == NotFoundError("Book not found with id: 999")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_id", ["not-a-number", "99999999999999999999"])
    async def test_delete_invalid_id_is_invalid_request(self, service, raw_id):
        result = await service.delete(raw_id)

        assert result.error == InvalidRequestError(f"Invalid book ID format: {raw_id}")

    @pytest.mark.asyncio
    async def test_delete_storage_failure(self, failing_store):
        result = await BookService(failing_store).delete("1")

        assert result.error == StorageFailureError("Failed to delete book")


class TestSearch:
    @pytest.mark.asyncio
    async def test_search_single_match(self, service, create_request):
        created = (await service.create(create_request)).unwrap()
        await service.create(create_request.model_copy(update={"title": "Other", "subtitle": ""}))

        found = (await service.search("Test")).unwrap()

        assert found == [created]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_over_title_and_subtitle(self, service, create_request):
        by_title = (await service.create(create_request.model_copy(update={"subtitle": ""}))).unwrap()
        by_subtitle = (
            await service.create(create_request.model_copy(update={"title": "Guide", "subtitle": "for TESTERS"}))
        ).unwrap()

        found = (await service.search("tEsT")).unwrap()

        assert [b.id for b in found] == [by_title.id, by_subtitle.id]

    @pytest.mark.asyncio
    async def test_search_without_matches_is_empty(self, service, create_request):
        await service.create(create_request)

        result = await service.search("zebra")

        assert result.ok
        assert result.value == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", [None, "", "   "])
    async def test_search_blank_query_is_invalid(self, service, query):
        result = await service.search(query)

        assert result.error == InvalidRequestError("Query parameter is required")

    @pytest.mark.asyncio
    async def test_search_storage_failure(self, broken_session_store):
        result = await BookService(broken_session_store).search("x")

        assert result.error == StorageFailureError("Failed to search books")
