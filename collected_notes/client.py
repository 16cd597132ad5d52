from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

try:
    import requests
except ImportError as exc:  # pragma: no cover
    raise SystemExit("The 'requests' package is required. Install it with 'pip install requests'.") from exc


JSON_ACCEPT = "application/json"
TEXT_ACCEPT = "text/plain"
DEFAULT_SEARCH_MODE = "exact"

logger = logging.getLogger("collected_notes")


class ApiError(RuntimeError):
    """Raised for any failed request, whether the server answered or not."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


def decode_body(response: requests.Response) -> Any:
    """Return the parsed JSON body, the raw text, or None for an empty body."""

    if not response.content:
        return None
    content_type = response.headers.get("Content-Type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


class CollectedNotesClient:
    def __init__(self, base_url: str, token: str, *, debug_logger: Optional[logging.Logger] = None) -> None:
        """Initialize a session configured with the bearer token."""

        self.base_url = base_url.rstrip("/")
        self.debug_logger = debug_logger
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}"
                ,"Accept": JSON_ACCEPT
            }
        )

    def _request(
        self
        ,method: str
        ,path: str
        ,*
        ,params: Optional[Dict[str, str]] = None
        ,payload: Optional[Dict[str, str]] = None
        ,accept: Optional[str] = None
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = {"Accept": accept} if accept else None

        logger.info("%s %s", method, url)
        if self.debug_logger and payload is not None:
            self.debug_logger.info(
                "Request body for %s %s:\n%s"
                ,method
                ,url
                ,json.dumps(payload, indent=2, ensure_ascii=False)
            )

        try:
            response = self.session.request(method, url, params=params, json=payload, headers=headers)
        except requests.RequestException as err:
            logger.error("%s %s failed: %s", method, url, err)
            raise ApiError(str(err)) from err

        body = decode_body(response)
        if self.debug_logger:
            self.debug_logger.info("Response %s for %s %s:\n%s", response.status_code, method, url, body)

        try:
            response.raise_for_status()
        except requests.HTTPError as err:
            logger.error("%s %s returned %s", method, url, response.status_code)
            raise ApiError(str(err), status_code=response.status_code, payload=body) from err
        return body

    # Sites

    def get_sites(self) -> Any:
        return self._request("GET", "/sites")

    def create_site(self, site_path: str, name: str) -> Any:
        return self._request("POST", "/sites", payload={"site_path": site_path, "name": name})

    def get_site(self, site_path: str) -> Any:
        return self._request("GET", f"/sites/{site_path}")

    def update_site(
        self
        ,site_path: str
        ,name: str
        ,headline: Optional[str] = None
        ,about: Optional[str] = None
        ,domain: Optional[str] = None
    ) -> Any:
        """Replace a site's settings; optional fields are only sent when given."""

        payload = {"site_path": site_path, "name": name}
        for key, value in (("headline", headline), ("about", about), ("domain", domain)):
            if value is not None:
                payload[key] = value
        return self._request("PUT", f"/sites/{site_path}", payload=payload)

    def delete_site(self, site_path: str) -> Any:
        return self._request("DELETE", f"/sites/{site_path}")

    # Notes

    def get_notes(self, site_path: str) -> Any:
        return self._request("GET", f"/sites/{site_path}/notes")

    def create_note(self, site_path: str, body: str, visibility: str) -> Any:
        return self._request("POST", f"/sites/{site_path}/notes", payload={"body": body, "visibility": visibility})

    def get_note(self, site_path: str, note_path: str) -> Any:
        return self._request("GET", f"/sites/{site_path}/notes/{note_path}")

    def update_note(self, site_path: str, note_path: str, body: str, visibility: str) -> Any:
        return self._request(
            "PUT"
            ,f"/sites/{site_path}/notes/{note_path}"
            ,payload={"body": body, "visibility": visibility}
        )

    def delete_note(self, site_path: str, note_path: str) -> Any:
        return self._request("DELETE", f"/sites/{site_path}/notes/{note_path}")

    def get_note_links(self, site_path: str, note_path: str) -> Any:
        """Return the links found in a note."""

        return self._request("GET", f"/sites/{site_path}/notes/{note_path}/links")

    def get_note_body_html(self, site_path: str, note_path: str) -> Any:
        """Return the note rendered as HTML."""

        return self._request("GET", f"/sites/{site_path}/notes/{note_path}/body")

    def get_note_markdown(self, site_path: str, note_path: str) -> Any:
        return self._request("GET", f"/sites/{site_path}/notes/{note_path}.md", accept=TEXT_ACCEPT)

    def get_note_plain_text(self, site_path: str, note_path: str) -> Any:
        return self._request("GET", f"/sites/{site_path}/notes/{note_path}.txt", accept=TEXT_ACCEPT)

    def search_notes(self, site_path: str, term: str, mode: Optional[str] = DEFAULT_SEARCH_MODE) -> Any:
        """Search a site's notes; an empty mode falls back to exact matching."""

        params = {"term": term, "mode": mode or DEFAULT_SEARCH_MODE}
        return self._request("GET", f"/sites/{site_path}/notes/search", params=params)
