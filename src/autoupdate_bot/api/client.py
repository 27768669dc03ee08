"""HTTP client for the update-set endpoints."""

from typing import Optional

import httpx
from pydantic import ValidationError

from autoupdate_bot.api.exceptions import ApiConflictError, ApiError
from autoupdate_bot.config import DEFAULT_API_ENDPOINT
from autoupdate_bot.models.update_set_models import UpdateSet, UpdateSetResult

DEFAULT_TIMEOUT = 30.0


class GemnasiumClient:
    """Synchronous client: one request per call, no retries."""

    def __init__(
        self,
        api_key: str | None,
        api_endpoint: str = DEFAULT_API_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_endpoint = api_endpoint.rstrip("/")
        self.timeout = timeout
        self._api_key = api_key or ""
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.api_endpoint,
                timeout=self.timeout,
                auth=("x", self._api_key),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "GemnasiumClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch_next_update_set(
        self, project_slug: str, branch: str, revision: str
    ) -> UpdateSet:
        response = self._request(
            "POST",
            f"/projects/{project_slug}/branches/{branch}/update_sets/next",
            {"revision": revision},
        )
        if not response.content.strip():
            return UpdateSet()
        payload = response.json()
        if payload is None:
            return UpdateSet()
        try:
            return UpdateSet.model_validate(payload)
        except ValidationError as exc:
            raise ApiError(f"Malformed update set in server response: {exc}") from exc

    def push_update_set_result(self, result: UpdateSetResult, branch: str) -> None:
        print(f"Pushing result (status='{result.state.value}'): ", end="", flush=True)
        if result.update_set_id == 0:
            raise ApiError("Missing update set ID")
        self._request(
            "PATCH",
            f"/projects/{result.project_slug}/branches/{branch}/update_sets/{result.update_set_id}",
            result.model_dump(mode="json"),
        )
        print("done")

    def _request(self, method: str, path: str, body: dict) -> httpx.Response:
        try:
            response = self.client.request(method, path, json=body)
        except httpx.RequestError as exc:
            raise ApiError(f"Request to {path} failed: {exc}") from exc

        if response.status_code == httpx.codes.CONFLICT:
            raise ApiConflictError(
                f"Server returned non-200 status: {response.status_code} Conflict",
                status_code=response.status_code,
            )
        if not response.is_success:
            raise ApiError(
                f"Server returned non-200 status: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        return response
