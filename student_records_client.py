"""Student records API client and form controller.

This module is the client side of the Student Records API.  It has
three layers:

* :class:`StudentRecordsAPI` – a thin wrapper around the REST API that
  uses the ``requests`` library.  Every method returns a tuple
  ``(data, error)``; ``error`` is ``None`` on success or a dictionary
  with ``status_code`` and ``message`` keys, where ``message`` is the
  server's ``error`` text.
* :class:`StudentForm` – the form controller.  It holds the raw text
  of the form inputs, checks them in the same order as the server
  (name, age, gender, midterm, final), submits a create or update and
  reports the outcome as a :class:`FormResult`.  The form is cleared
  after a successful save and left untouched after a failure so the
  user can correct it and resubmit.
* A small command line interface (``python student_records_client.py
  --help``) built on the two classes above.

The base URL defaults to ``STUDENT_RECORDS_URL`` or
``http://localhost:3000``.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = os.getenv("STUDENT_RECORDS_URL", "http://localhost:3000")

ApiError = Dict[str, Any]


class StudentRecordsAPI:
    """Client for the ``/api/students`` and ``/api/health`` endpoints."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:3000``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.  Any object with
                a compatible ``request`` method can be passed, which is
                how the tests drive the client against an in-process app.
            timeout: Seconds to wait for each response.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[ApiError]]:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(data, error)``.  ``data`` contains the parsed JSON
            response on success and ``error`` is ``None``.  On failure,
            ``data`` is ``None`` and ``error`` is a dictionary with keys
            ``status_code`` and ``message`` describing the issue.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc) or "Network error"}

        data: Any = None
        if response.content:
            try:
                data = response.json()
            except ValueError:
                data = None

        if response.status_code >= 400:
            message = ""
            if isinstance(data, dict):
                message = str(data.get("error") or data.get("detail") or "")
            if not message:
                message = f"HTTP {response.status_code}"
            logger.error("API request failed (%s): %s", response.status_code, message)
            return None, {"status_code": response.status_code, "message": message}
        return data, None

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def health(self) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        return self._request("GET", "/api/health")

    def list_students(self, query: Optional[str] = None) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        """Retrieve students, optionally filtered by name or id."""
        params = {"q": query} if query else None
        data, error = self._request("GET", "/api/students", params=params)
        if error:
            return [], error
        return (data if isinstance(data, list) else []), None

    def get_student(self, student_id: Any) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        return self._request("GET", f"/api/students/{student_id}")

    def create_student(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        return self._request("POST", "/api/students", json_body=payload)

    def update_student(
        self, student_id: Any, payload: Dict[str, Any]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        return self._request("PUT", f"/api/students/{student_id}", json_body=payload)

    def delete_student(self, student_id: Any) -> Tuple[bool, Optional[ApiError]]:
        """Delete a student.

        Returns:
            A tuple ``(success, error)``.
        """
        data, error = self._request("DELETE", f"/api/students/{student_id}")
        if error:
            return False, error
        return bool(isinstance(data, dict) and data.get("success")), None


# ----------------------------------------------------------------------
# Form controller
# ----------------------------------------------------------------------
FORM_FIELDS = ("name", "age", "gender", "midterm", "final")
NUMERIC_FIELDS = ("age", "midterm", "final")


def _number(text: str) -> Any:
    """Convert form text to a number; blank becomes ``None``.

    Text that is not a number is returned unchanged so that
    :meth:`StudentForm.validate` can report it.
    """
    text = (text or "").strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def letter_grade(midterm: Any, final: Any) -> str:
    """Letter grade for the average of two scores, ``"N/A"`` if either is missing."""
    if midterm in (None, "") or final in (None, ""):
        return "N/A"
    try:
        average = (float(midterm) + float(final)) / 2
    except (TypeError, ValueError):
        return "N/A"
    if average >= 90:
        return "A"
    if average >= 80:
        return "B"
    if average >= 70:
        return "C"
    if average >= 60:
        return "D"
    return "F"


@dataclass
class FormResult:
    success: bool
    message: str
    record: Optional[Dict[str, Any]] = None


@dataclass
class StudentForm:
    """Raw text state of the student form.

    ``student_id`` is empty for a new student and holds the id of the
    record being edited otherwise.
    """

    student_id: str = ""
    name: str = ""
    age: str = ""
    gender: str = ""
    midterm: str = ""
    final: str = ""
    api: Optional[StudentRecordsAPI] = field(default=None, repr=False, compare=False)

    def payload(self) -> Dict[str, Any]:
        return {
            "name": self.name.strip(),
            "age": _number(self.age),
            "gender": self.gender.strip(),
            "midterm": _number(self.midterm),
            "final": _number(self.final),
        }

    def validate(self) -> Optional[str]:
        """Return the first problem with the form, or ``None`` if it can be sent."""
        payload = self.payload()
        for name in FORM_FIELDS:
            value = payload[name]
            if value is None or value == "":
                return f"{name.capitalize()} is required"
            if name in NUMERIC_FIELDS and isinstance(value, str):
                return f"{name.capitalize()} must be a number"
        return None

    def clear(self) -> None:
        self.student_id = ""
        for name in FORM_FIELDS:
            setattr(self, name, "")

    def load(self, record: Dict[str, Any]) -> None:
        """Fill the form from a stored record to edit it."""
        self.student_id = str(record.get("id", ""))
        for name in FORM_FIELDS:
            value = record.get(name)
            setattr(self, name, "" if value is None else str(value))

    def _client(self) -> StudentRecordsAPI:
        if self.api is None:
            self.api = StudentRecordsAPI()
        return self.api

    def submit(self) -> FormResult:
        """Create or update the student described by the form."""
        problem = self.validate()
        if problem:
            return FormResult(False, problem)

        api = self._client()
        payload = self.payload()
        if self.student_id.strip():
            record, error = api.update_student(self.student_id.strip(), payload)
            success_message = "Student updated successfully!"
        else:
            record, error = api.create_student(payload)
            success_message = "Student created successfully!"

        if error:
            return FormResult(False, error["message"] or "Save failed")
        self.clear()
        return FormResult(True, success_message, record)

    def delete(self, student_id: Any) -> FormResult:
        """Delete a student; clears the form if it was being edited."""
        deleted, error = self._client().delete_student(student_id)
        if error or not deleted:
            return FormResult(False, (error or {}).get("message") or "Delete failed")
        if self.student_id and self.student_id == str(student_id):
            self.clear()
        return FormResult(True, "Student deleted successfully!")


# ----------------------------------------------------------------------
# Command line interface
# ----------------------------------------------------------------------
def _add_record_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", default="", help="Student name")
    parser.add_argument("--age", default="", help="Age in years")
    parser.add_argument("--gender", default="", help="Gender code, e.g. F or M")
    parser.add_argument("--midterm", default="", help="Midterm score")
    parser.add_argument("--final", default="", help="Final score")


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Manage student records through the REST API.")
    ap.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Server base URL")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Show server mode and database status")
    list_parser = sub.add_parser("list", help="List or search students")
    list_parser.add_argument("-q", "--query", help="Name substring or exact id")
    add_parser = sub.add_parser("add", help="Create a student")
    _add_record_arguments(add_parser)
    update_parser = sub.add_parser("update", help="Replace a student's fields")
    update_parser.add_argument("id", help="Student id")
    _add_record_arguments(update_parser)
    delete_parser = sub.add_parser("delete", help="Delete a student")
    delete_parser.add_argument("id", help="Student id")

    args = ap.parse_args(argv)
    api = StudentRecordsAPI(base_url=args.base_url)

    if args.command == "health":
        data, error = api.health()
    elif args.command == "list":
        students, error = api.list_students(args.query)
        data = [dict(s, grade=letter_grade(s.get("midterm"), s.get("final"))) for s in students]
    elif args.command in ("add", "update"):
        form = StudentForm(
            student_id=getattr(args, "id", ""),
            name=args.name,
            age=args.age,
            gender=args.gender,
            midterm=args.midterm,
            final=args.final,
            api=api,
        )
        result = form.submit()
        print(result.message, file=sys.stdout if result.success else sys.stderr)
        if result.record:
            _print_json(result.record)
        return 0 if result.success else 1
    else:
        result = StudentForm(api=api).delete(args.id)
        print(result.message, file=sys.stdout if result.success else sys.stderr)
        return 0 if result.success else 1

    if error:
        print(f"[!] {error['message']}", file=sys.stderr)
        return 1
    _print_json(data)
    return 0


if __name__ == "__main__":
    sys.exit(main())
