"""CastMe API client.

This module defines a small client wrapper around the CastMe REST API
(``/api/v1``).  It is the logic layer used by front ends: it registers
and logs users in, remembers the id of the logged in user and exposes
the profile and casting operations.  The client uses the ``requests``
library internally.

* :meth:`CastMeAPI.register_user` – create a new account.
* :meth:`CastMeAPI.login` – authenticate and remember the user id.
* :meth:`CastMeAPI.retrieve_user` – fetch the profile of a user.
* :meth:`CastMeAPI.update_user` – replace credentials and profile.
* :meth:`CastMeAPI.unregister_user` – delete the account.
* :meth:`CastMeAPI.get_castings` – list the castings a user applied to.
* :meth:`CastMeAPI.apply_to_casting` – apply to a casting of a project.
* :meth:`CastMeAPI.list_projects` – list published projects.

Any non-2xx response raises :class:`CastMeAPIError` carrying the
status code and the server's ``detail`` message.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests


logger = logging.getLogger(__name__)

NO_USER = "NO-ID"


class CastMeAPIError(Exception):
    """Raised when a request fails or the API answers with an error."""

    def __init__(self, status_code: Optional[int], message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class CastMeAPI:
    """Client for interacting with the CastMe API."""

    def __init__(
        self,
        *,
        base_url: str = "http://localhost:5000/api/v1",
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the versioned API, e.g.
                ``http://localhost:5000/api/v1``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Timeout in seconds applied to every request.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.user_id: str = NO_USER

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> Any:
        """Perform an HTTP request to the API and return the parsed JSON.

        Raises:
            CastMeAPIError: on transport failures and non-2xx answers.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
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
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            raise CastMeAPIError(status, str(message)) from exc
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            raise CastMeAPIError(None, str(exc)) from exc
        if response.content:
            return response.json()
        return None

    @staticmethod
    def _profile(
        personal_data: Dict[str, Any],
        physical_data: Dict[str, Any],
        professional_data: Dict[str, Any],
        videobook_link: Optional[str],
        pics: Optional[List[str]],
    ) -> Dict[str, Any]:
        return {
            "personal_data": personal_data,
            "physical_data": physical_data,
            "professional_data": professional_data,
            "videobook_link": videobook_link,
            "pics": pics or [],
        }

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------
    def register_user(
        self,
        email: str,
        password: str,
        personal_data: Dict[str, Any],
        physical_data: Dict[str, Any],
        professional_data: Dict[str, Any],
        videobook_link: Optional[str] = None,
        pics: Optional[List[str]] = None,
    ) -> bool:
        body = {"email": email, "password": password}
        body.update(self._profile(personal_data, physical_data, professional_data, videobook_link, pics))
        self._request("POST", "/users/", json_body=body)
        return True

    def login(self, email: str, password: str) -> bool:
        """Authenticate and keep the returned id in :attr:`user_id`."""
        data = self._request("POST", "/users/auth", json_body={"email": email, "password": password})
        self.user_id = data["id"]
        return True

    def logout(self) -> None:
        self.user_id = NO_USER

    @property
    def logged_in(self) -> bool:
        return self.user_id != NO_USER

    def _resolve_user_id(self, user_id: Optional[str]) -> str:
        if user_id is not None:
            return user_id
        if not self.logged_in:
            raise CastMeAPIError(None, "no user logged in")
        return self.user_id

    def retrieve_user(self, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Fetch a profile; defaults to the logged in user."""
        return self._request("GET", f"/users/{self._resolve_user_id(user_id)}")

    def update_user(
        self,
        email: str,
        password: str,
        new_email: str,
        new_password: str,
        personal_data: Dict[str, Any],
        physical_data: Dict[str, Any],
        professional_data: Dict[str, Any],
        videobook_link: Optional[str] = None,
        pics: Optional[List[str]] = None,
    ) -> bool:
        body = {
            "email": email,
            "password": password,
            "new_email": new_email,
            "new_password": new_password,
        }
        body.update(self._profile(personal_data, physical_data, professional_data, videobook_link, pics))
        self._request("PATCH", "/users/", json_body=body)
        return True

    def unregister_user(self, email: str, password: str, user_id: Optional[str] = None) -> bool:
        """Delete an account; forgets the logged in user if it was deleted."""
        target = self._resolve_user_id(user_id)
        self._request("DELETE", f"/users/{target}", json_body={"email": email, "password": password})
        if target == self.user_id:
            self.logout()
        return True

    def get_castings(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._request("GET", f"/users/{self._resolve_user_id(user_id)}/castings")

    def apply_to_casting(self, project_id: str, casting_id: str, user_id: Optional[str] = None) -> bool:
        self._request(
            "POST",
            f"/users/{self._resolve_user_id(user_id)}/castings",
            json_body={"project_id": project_id, "casting_id": casting_id},
        )
        return True

    # ------------------------------------------------------------------
    # Project operations
    # ------------------------------------------------------------------
    def list_projects(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/projects/")
