"""Wish Lighthouse API client.

This module defines a thin client around the wish wall REST API.  It
uses the ``requests`` library internally and exposes one method per
operation:

* :meth:`list_wishes` – one page of the feed (filter and sort optional).
* :meth:`get_wish` – a single wish by id.
* :meth:`create_wish` – post a new wish, optionally anonymously.
* :meth:`toggle_like` – like or unlike a wish.
* :meth:`get_profile` – the identity the server sees for this client.
* :meth:`list_user_wishes` – the signed wishes of one user.
* :meth:`health` – the server health check.

Every method returns a tuple ``(data, error)``.  On success ``data``
holds the unwrapped ``data`` member of the response envelope and
``error`` is ``None``; on failure ``data`` is ``None`` and ``error`` is
a dictionary with ``status_code`` and ``message`` keys.

The client supports optional authentication via a bearer token (see
``create_token.py``).  Without a token the server treats the caller as
its demo user.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class WishLighthouseAPI:
    """Client for interacting with the Wish Lighthouse API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Server root, e.g. ``http://localhost:5000``.  The
                ``/api`` prefix is added by the client.
            token: Optional bearer token sent in the ``Authorization``
                header.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
        unwrap: bool = True,
    ) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``).
            path: Path relative to :attr:`base_url` (e.g. ``/api/wishes``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
            unwrap: Return the envelope's ``data`` member instead of the
                whole body.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("message") or err_json.get("detail") or str(err_json)
                    if err_json.get("errors"):
                        message = f"{message}: {'; '.join(err_json['errors'])}"
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
            body = response.json()
        except ValueError:
            return None, {"status_code": response.status_code, "message": "Response is not JSON"}
        if unwrap and isinstance(body, dict) and "data" in body:
            return body["data"], None
        return body, None

    @staticmethod
    def _page_params(page: int, limit: Optional[int]) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": page}
        if limit is not None:
            params["limit"] = limit
        return params

    # ------------------------------------------------------------------
    # Wishes
    # ------------------------------------------------------------------
    def list_wishes(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        category: Optional[str] = None,
        sort: str = "createdAt",
    ) -> Result:
        """Fetch one page of wishes.

        ``category="all"`` is not sent; the server treats a missing
        category as no filter.
        """
        params = self._page_params(page, limit)
        params["sort"] = sort
        if category and category != "all":
            params["category"] = category
        return self._request("GET", "/api/wishes", params=params)

    def get_wish(self, wish_id: str) -> Result:
        return self._request("GET", f"/api/wishes/{wish_id}")

    def create_wish(self, content: str, category: str, is_anonymous: bool = False) -> Result:
        payload = {"content": content, "category": category, "isAnonymous": is_anonymous}
        return self._request("POST", "/api/wishes", json_body=payload)

    def toggle_like(self, wish_id: str) -> Result:
        """Like the wish, or remove the like if already given.

        The returned data holds ``wishId``, ``likes`` and ``isLiked``.
        """
        return self._request("POST", f"/api/wishes/{wish_id}/like")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_profile(self) -> Result:
        return self._request("GET", "/api/users/profile")

    def list_user_wishes(self, user_id: str, page: int = 1, limit: Optional[int] = None) -> Result:
        return self._request(
            "GET", f"/api/users/{user_id}/wishes", params=self._page_params(page, limit)
        )

    def health(self) -> Result:
        return self._request("GET", "/health", unwrap=False)
