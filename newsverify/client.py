"""
Python client for the News Verification API.

The token lives in an injected ``CredentialProvider`` rather than in any
global state, so several clients (an admin console and a reader session,
say) can run side by side.

Example:
    credentials = InMemoryCredentials()
    client = NewsVerifyClient("http://localhost:8000", credentials)
    client.login("reader@example.com", "password123")
    page = client.list_news(page=1, page_size=10)
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, Iterator, List, Optional, Protocol

import httpx


logger = logging.getLogger(__name__)

# Content the server requires when a comment's only payload is an image
IMAGE_ONLY_PLACEHOLDER = "[Image evidence]"


class CredentialProvider(Protocol):
    """Where the client keeps its bearer token."""

    def get_token(self) -> Optional[str]: ...

    def set_token(self, token: str) -> None: ...

    def clear(self) -> None: ...


class InMemoryCredentials:
    """Keeps the token for the lifetime of the object."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class BearerAuth(httpx.Auth):
    """
    Adds the provider's token to each request and forgets it on a 401.

    Login and registration are sent without the token, so a failed
    attempt leaves the current session alone.
    """

    credential_paths = ("/auth/login", "/auth/register")

    def __init__(self, credentials: CredentialProvider):
        self.credentials = credentials

    def auth_flow(self, request: httpx.Request) -> Iterator[httpx.Request]:
        token = self.credentials.get_token()
        if request.url.path.endswith(self.credential_paths):
            token = None
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        response = yield request
        if response.status_code == 401 and token:
            logger.info("Token rejected by server, clearing stored credentials")
            self.credentials.clear()


class ApiError(Exception):
    """A non-2xx response."""

    def __init__(self, status_code: int, error: Any):
        self.status_code = status_code
        self.error = error
        super().__init__(f"{status_code}: {error}")


@dataclass
class Page:
    """One page of a list endpoint."""

    data: List[Dict[str, Any]]
    page: int
    page_size: int
    total: int
    total_pages: int = field(default=0)

    @classmethod
    def from_response(cls, body: Dict[str, Any]) -> "Page":
        pagination = body["pagination"]
        return cls(
            data=body["data"],
            page=pagination["page"],
            page_size=pagination["pageSize"],
            total=pagination["total"],
            total_pages=pagination.get("totalPages", math.ceil(pagination["total"] / pagination["pageSize"])),
        )

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


class NewsVerifyClient:
    """Typed-ish wrapper over the REST endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        credentials: Optional[CredentialProvider] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        if http is None and base_url is None:
            raise ValueError("Either base_url or http must be given")
        self.credentials = credentials or InMemoryCredentials()
        self._auth = BearerAuth(self.credentials)
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "NewsVerifyClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self._http.request(method, path, auth=self._auth, **kwargs)
        if response.is_error:
            try:
                error = response.json().get("error")
            except ValueError:
                error = response.text
            raise ApiError(response.status_code, error)
        return response.json()

    @staticmethod
    def _drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in values.items() if v is not None}

    # -------------------------------------------------------------------------
    # Auth & users
    # -------------------------------------------------------------------------

    def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        avatar_url: Optional[str] = None
    ) -> Dict[str, Any]:
        body = self._request("POST", "/auth/register", json=self._drop_none({
            "email": email,
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
            "avatarUrl": avatar_url,
        }))
        self.credentials.set_token(body["token"])
        return body["user"]

    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.credentials.set_token(body["token"])
        return body["user"]

    def logout(self) -> None:
        self.credentials.clear()

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")

    def list_users(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/users")

    def update_user_role(self, user_id: str, role: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/users/{user_id}/role", json={"role": role})

    def update_profile(
        self,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        avatar_url: Optional[str] = None
    ) -> Dict[str, Any]:
        return self._request("PATCH", "/users/me", json=self._drop_none({
            "firstName": first_name,
            "lastName": last_name,
            "avatarUrl": avatar_url,
        }))

    # -------------------------------------------------------------------------
    # News
    # -------------------------------------------------------------------------

    def list_news(
        self,
        page: int = 1,
        page_size: int = 10,
        status: Optional[str] = None,
        query: Optional[str] = None,
        include_deleted: bool = False
    ) -> Page:
        params = self._drop_none({
            "page": page,
            "pageSize": page_size,
            "status": status,
            "q": query or None,
            "includeDeleted": "true" if include_deleted else None,
        })
        return Page.from_response(self._request("GET", "/news", params=params))

    def get_news(self, news_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/news/{news_id}")

    def create_news(
        self,
        topic: str,
        short_detail: str,
        full_detail: str,
        image_url: Optional[str] = None
    ) -> Dict[str, Any]:
        return self._request("POST", "/news", json=self._drop_none({
            "topic": topic,
            "shortDetail": short_detail,
            "fullDetail": full_detail,
            "imageUrl": image_url,
        }))

    def update_news_status(self, news_id: str, status: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/news/{news_id}", json={"status": status})

    def set_news_visibility(self, news_id: str, is_deleted: bool) -> Dict[str, Any]:
        return self._request("PATCH", f"/news/{news_id}/visibility", json={"isDeleted": is_deleted})

    def cast_vote(self, news_id: str, vote: str) -> Dict[str, Any]:
        return self._request("POST", f"/news/{news_id}/vote", json={"vote": vote})

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    def list_comments(self, news_id: str, page: int = 1, page_size: int = 10) -> Page:
        body = self._request(
            "GET", f"/news/{news_id}/comments", params={"page": page, "pageSize": page_size}
        )
        return Page.from_response(body)

    def create_comment(
        self,
        news_id: str,
        content: Optional[str] = None,
        image_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Post a comment.

        An image with no text is sent with ``IMAGE_ONLY_PLACEHOLDER`` as
        its content.
        """
        if not (content or "").strip():
            if not image_url:
                raise ValueError("A comment needs content or an image")
            content = IMAGE_ONLY_PLACEHOLDER
        return self._request("POST", f"/news/{news_id}/comments", json=self._drop_none({
            "content": content,
            "imageUrl": image_url,
        }))

    def delete_comment(self, comment_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/comments/{comment_id}")

    # -------------------------------------------------------------------------
    # Upload
    # -------------------------------------------------------------------------

    def upload_file(self, fileobj: BinaryIO, filename: str, content_type: str = "application/octet-stream") -> str:
        body = self._request("POST", "/upload", files={"file": (filename, fileobj, content_type)})
        return body["url"]
