# kennel_pedigree/registry_api.py

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from .identifiers import normalize_dog_id
from .models import DogRecord

LOGGER = logging.getLogger(__name__)


# -------------------------------
# HTTP Client Builder
# -------------------------------

def build_client() -> requests.Session:
    """
    Build and return a configured HTTP session for registry API calls.
    """
    session = requests.Session()
    session.headers.update({
        "User-Agent": "kennel-pedigree/1.0",
        "Accept": "application/json",
    })
    return session


# -------------------------------
# Record lookup (REAL API)
# -------------------------------

class HttpDogStore:
    """
    Record store backed by the kennel registry REST API.

        GET {base_url}/dogs/{id}

    404 means "no such dog". Any other HTTP error is raised to the caller;
    lookups are not retried.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else build_client()
        self.timeout = timeout

    def dog_url(self, dog_id: Any) -> str:
        return f"{self.base_url}/dogs/{quote(normalize_dog_id(dog_id), safe='')}"

    def find_by_id(self, dog_id: Any) -> Optional[DogRecord]:
        if not normalize_dog_id(dog_id):
            return None

        url = self.dog_url(dog_id)
        LOGGER.debug("GET %s", url)

        resp = self.session.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()

        data = resp.json()
        # Some deployments wrap the row as {"data": {...}}
        if isinstance(data, dict) and "data" in data:
            data = data["data"]

        if data is None:
            return None
        if not isinstance(data, dict):
            raise RuntimeError(
                f"Unexpected dog response structure: expected object, got {type(data)}"
            )

        return DogRecord.from_dict(data)
