"""
Job Board API Client

Thin httpx wrapper over the REST API. Base URL and bearer token belong to the
client instance and are sent explicitly with each call; nothing is stored in
module-level defaults. `with_token()` returns a new client for another
identity instead of mutating this one.

Usage:
    client = JobBoardClient("http://localhost:8000/api")
    auth = client.login("asha@cmrec.ac.in", "secret1")
    me = client.with_token(auth["token"])
    me.list_jobs(jobType="internship", page=2)
"""

from typing import Any, Dict, List, Optional

import httpx


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, errors: Optional[List[dict]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(f"{status_code}: {message}")


class JobBoardClient:

    def __init__(
        self,
        base_url: str = "",
        token: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._http = http or httpx.Client(timeout=timeout)

    def with_token(self, token: Optional[str]) -> "JobBoardClient":
        return JobBoardClient(self.base_url, token=token, http=self._http)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, json: Any = None, params: Optional[dict] = None) -> dict:
        response = self._http.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            params={k: v for k, v in (params or {}).items() if v is not None},
            headers=self._headers(),
        )
        try:
            body = response.json()
        except ValueError:
            body = {"message": response.text}

        if response.is_error:
            raise ApiError(response.status_code, body.get("message", "Request failed"), body.get("errors"))
        return body

    # --- auth ---

    def register(self, **fields) -> dict:
        return self._request("POST", "/auth/register", json=fields)

    def login(self, email: str, password: str) -> dict:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def me(self) -> dict:
        return self._request("GET", "/auth/me")

    def update_profile(self, **fields) -> dict:
        return self._request("PUT", "/users/profile", json=fields)

    def update_account_profile(self, **fields) -> dict:
        """PUT /auth/profile; same behavior as update_profile."""
        return self._request("PUT", "/auth/profile", json=fields)

    def change_password(self, current_password: str, new_password: str) -> dict:
        return self._request(
            "PUT", "/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    # --- jobs ---

    def list_jobs(self, **filters) -> dict:
        return self._request("GET", "/jobs", params=filters)

    def create_job(self, **fields) -> dict:
        return self._request("POST", "/jobs", json=fields)

    def get_job(self, job_id: str) -> dict:
        return self._request("GET", f"/jobs/{job_id}")

    def update_job(self, job_id: str, **fields) -> dict:
        return self._request("PUT", f"/jobs/{job_id}", json=fields)

    def delete_job(self, job_id: str) -> dict:
        return self._request("DELETE", f"/jobs/{job_id}")

    # --- users / applications ---

    def get_profile(self, user_id: str) -> dict:
        return self._request("GET", f"/users/profile/{user_id}")

    def my_jobs(self) -> dict:
        return self._request("GET", "/users/my-jobs")

    def apply(self, job_id: str) -> dict:
        return self._request("POST", f"/users/apply/{job_id}")

    def my_applications(self) -> dict:
        return self._request("GET", "/users/my-applications")

    def set_application_status(self, job_id: str, user_id: str, status: str) -> dict:
        return self._request("PUT", f"/users/application-status/{job_id}/{user_id}", json={"status": status})
