"""Book Catalog API client.

This module defines a small client wrapper around the Book Catalog REST
API.  The client uses the ``requests`` library internally and exposes
one method per operation:

* :meth:`list_books` – return every book (optionally paginated).
* :meth:`get_book` – fetch a single book by its identifier.
* :meth:`create_book` – submit a new book.
* :meth:`update_book` – change fields of an existing book.
* :meth:`delete_book` – remove a book.
* :meth:`search_books` – search titles and subtitles.

The API wraps every payload in an envelope
``{"success", "message", "data", "error"}``.  The client unwraps it and
returns ``(data, error)`` tuples: on success ``error`` is ``None``; on
failure ``data`` is ``None`` (or an empty list) and ``error`` is a
dictionary with keys ``status_code`` and ``message``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15

Error = Dict[str, Any]


class BookCatalogAPI:
    """Client for interacting with the book catalog API."""

    def __init__(
        self,
        *,
        base_url: str,
        prefix: str = "/api/v1",
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:9000``.
            prefix: Versioned API prefix prepended to every path.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/") + "/" + prefix.strip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request and unwrap the response envelope.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``, etc.).
            path: Path relative to the API prefix (e.g. ``/books/``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("error") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

        if not response.content:
            return None, None
        try:
            envelope = response.json()
        except ValueError:
            logger.error("API returned a non-JSON body for %s %s", method, url)
            return None, {"status_code": response.status_code, "message": "Invalid JSON in response"}
        if isinstance(envelope, dict) and "success" in envelope:
            if not envelope.get("success"):
                message = envelope.get("error") or envelope.get("message") or "Request failed"
                return None, {"status_code": response.status_code, "message": message}
            return envelope.get("data"), None
        return envelope, None

    # ------------------------------------------------------------------
    # Book operations
    # ------------------------------------------------------------------
    def list_books(
        self, *, limit: Optional[int] = None, offset: int = 0
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve all books.

        Returns:
            A tuple ``(books, error)``. ``books`` is empty on failure.
        """
        params: Dict[str, Any] = {"offset": offset}
        if limit is not None:
            params["limit"] = limit
        data, error = self._request("GET", "/books/", params=params)
        if error:
            return [], error
        return data or [], None

    def get_book(self, book_id: Any) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Retrieve a single book by ID."""
        return self._request("GET", f"/books/{book_id}")

    def create_book(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a book.

        Args:
            payload: Book fields (``isbn``, ``title``, ``subtitle``,
                ``copyrightYear``, ``status``).
        """
        return self._request("POST", "/books/", json_body=payload)

    def update_book(
        self, book_id: Any, payload: Dict[str, Any]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Update the fields present in ``payload`` on book ``book_id``."""
        body = dict(payload)
        body["id"] = book_id
        return self._request("PATCH", "/books/", json_body=body)

    def delete_book(self, book_id: Any) -> Tuple[bool, Optional[Error]]:
        """Delete a book.

        Returns:
            A tuple ``(deleted, error)``.
        """
        _, error = self._request("DELETE", f"/books/{book_id}")
        if error:
            return False, error
        return True, None

    def search_books(self, query: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Search books whose title or subtitle contains ``query``."""
        data, error = self._request("GET", "/books/search", params={"query": query})
        if error:
            return [], error
        return data or [], None
