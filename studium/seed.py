"""
Populate a running Studium server with sample data through its REST API.

Usage:
    python -m studium.seed [BASE_URL]
"""

import os
import sys
from typing import Dict, Optional

import requests

DEFAULT_BASE_URL = "http://127.0.0.1:8000"


class SeedError(RuntimeError):
    """Raised when the server rejects a seeding request."""


def _post(session, url: str, payload: Dict) -> Dict:
    response = session.post(url, json=payload)
    if response.status_code not in (200, 201):
        raise SeedError(f"POST {url} failed with {response.status_code}: {response.text}")
    return response.json()


def seed(base_url: Optional[str] = None, session=None) -> Dict[str, str]:
    """Create a teacher, a student and a graded enrollment; return the new ids.

    ``session`` may be anything with a requests-style ``post``; a fresh
    ``requests.Session`` is used when omitted.
    """
    base_url = (base_url or os.environ.get("STUDIUM_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
    session = session or requests.Session()
    
    teacher = _post(session, f"{base_url}/users", {
        "name": "Ana", "username": "ana", "password": "pw", "role": "teacher"
    })
    student = _post(session, f"{base_url}/users", {
        "name": "Bob", "username": "bob", "password": "pw", "role": "student"
    })
    course = _post(session, f"{base_url}/courses", {
        "name": "Algebra", "description": "Linear equations and matrices",
        "teacher_id": teacher["id"]
    })
    _post(session, f"{base_url}/courses/{course['id']}/enrollments", {"student_id": student["id"]})
    for grade in (80, 100):
        _post(session, f"{base_url}/courses/{course['id']}/grades",
              {"teacher_id": teacher["id"], "student_id": student["id"], "grade": grade, "weight": 1})
    
    return {"teacher_id": teacher["id"], "student_id": student["id"], "course_id": course["id"]}


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        ids = seed(argv[0] if argv else None)
    except (requests.RequestException, SeedError) as e:
        print(f"Seeding failed: {e}", file=sys.stderr)
        return 1
    for key, value in ids.items():
        print(f"{key}: {value}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
