# app/client/exam_client.py
"""
HTTP client for the exam session API.

Transient failures (connection errors, timeouts, 502/503/504) are retried with
exponential backoff. Guard violations (409) are permanent and raised on the
first response; 404 becomes None for the read operations.
"""

import logging
import time
from typing import Callable, List, Optional

import requests

from app.core.config import settings
from app.core.decorator import (
    AppException,
    GuardViolation,
    NotFoundError,
    PermissionDenied,
    ServiceUnavailable,
)

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {502, 503, 504}


class ExamServiceClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.base_url = (base_url or settings.client_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.client_timeout_seconds
        self.max_retries = (
            max_retries if max_retries is not None else settings.client_max_retries
        )
        self.backoff_seconds = (
            backoff_seconds
            if backoff_seconds is not None
            else settings.client_backoff_seconds
        )
        self.sleep = sleep
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.set_token(token)

    def set_token(self, token: str) -> None:
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    # ==================== Transport ====================

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        last_error: Optional[ServiceUnavailable] = None

        for attempt in range(self.max_retries + 1):
            try:
                response = self.session.request(
                    method, url, timeout=self.timeout, **kwargs
                )
            except (requests.ConnectionError, requests.Timeout) as e:
                last_error = ServiceUnavailable(f"{method} {path} failed: {e}")
            else:
                if response.status_code not in RETRYABLE_STATUS:
                    return self._handle_response(response)
                last_error = ServiceUnavailable(
                    f"{method} {path} returned {response.status_code}"
                )

            if attempt < self.max_retries:
                delay = self.backoff_seconds * (2**attempt)
                logger.warning(
                    f"{last_error.message} (attempt {attempt + 1}/{self.max_retries + 1}), "
                    f"retrying in {delay:.2f}s"
                )
                self.sleep(delay)

        raise last_error

    @staticmethod
    def _handle_response(response: requests.Response):
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code < 400:
            return body

        body = body if isinstance(body, dict) else {}
        message = body.get("error") or body.get("detail") or response.reason or "Request failed"
        code = body.get("code", "error")

        if response.status_code == 409:
            raise GuardViolation(message, code)
        if response.status_code == 404:
            raise NotFoundError(message, code)
        if response.status_code == 403:
            raise PermissionDenied(message, code)
        raise AppException(str(message), response.status_code, code)

    def _get_optional(self, path: str, **kwargs):
        try:
            return self._request("GET", path, **kwargs)
        except NotFoundError:
            return None

    # ==================== Auth ====================

    def login(self, email: str, password: str) -> dict:
        data = self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        self.set_token(data["access_token"])
        return data

    # ==================== Attempts ====================

    def start_attempt(self, test_id: int) -> dict:
        return self._request("POST", f"/tests/{test_id}/attempts")

    def start_section(self, attempt_id: int, section_number: int) -> dict:
        return self._request(
            "POST", f"/attempts/{attempt_id}/sections/{section_number}/start"
        )

    def submit_section(
        self, attempt_id: int, section_number: int, answers: List[dict]
    ) -> dict:
        return self._request(
            "POST",
            f"/attempts/{attempt_id}/sections/{section_number}/submit",
            json={"answers": answers},
        )

    def save_answers(
        self, attempt_id: int, section_number: int, answers: List[dict]
    ) -> dict:
        return self._request(
            "PUT",
            f"/attempts/{attempt_id}/sections/{section_number}/answers",
            json={"answers": answers},
        )

    def get_attempt(self, attempt_id: int) -> Optional[dict]:
        return self._get_optional(f"/attempts/{attempt_id}")

    def get_section_timer(self, attempt_id: int, section_number: int) -> dict:
        return self._request(
            "GET", f"/attempts/{attempt_id}/sections/{section_number}/timer"
        )

    def get_section_questions(self, attempt_id: int, section_number: int) -> dict:
        return self._request(
            "GET", f"/attempts/{attempt_id}/sections/{section_number}/questions"
        )

    def get_result(self, attempt_id: int) -> Optional[dict]:
        return self._get_optional(f"/attempts/{attempt_id}/result")

    # ==================== Tests ====================

    def get_test_definition(self, test_id: int) -> Optional[dict]:
        return self._get_optional(f"/tests/{test_id}")

    def get_leaderboard(self, test_id: int) -> Optional[dict]:
        return self._get_optional(f"/tests/{test_id}/leaderboard")
