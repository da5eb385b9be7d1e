import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "v61.0"
DUPLICATE_VALUE = "DUPLICATE_VALUE"
# characters JavaScript's encodeURIComponent leaves alone
URI_COMPONENT_SAFE = "!'()*~"


class SalesforceSession(requests.Session):
    """A requests Session that sends the chosen Authorization header on every call"""

    def __init__(self, authorization: str):
        super().__init__()
        self.headers.update(
            {"Authorization": authorization, "Accept": "application/json"}
        )


def normalize_api_version(api_version: Optional[str]) -> str:
    if not api_version:
        return DEFAULT_API_VERSION
    api_version = str(api_version)
    return api_version if api_version.startswith("v") else f"v{api_version}"


def rest_url(base_url: str, api_version: Optional[str], path: str) -> str:
    return f"{base_url}/services/data/{normalize_api_version(api_version)}/{path}"


def user_by_username_soql(username: str) -> str:
    """Builds the URL-ready SOQL for a username lookup.

    The query is assembled pre-encoded so the username is escaped exactly once."""
    encoded = quote(username, safe=URI_COMPONENT_SAFE)
    return f"SELECT+Id+FROM+User+WHERE+Username+LIKE+'{encoded}'+ORDER+BY+Id+ASC"


def find_user_by_username(
    session: requests.Session,
    base_url: str,
    username: str,
    api_version: Optional[str] = None,
) -> requests.Response:
    url = rest_url(base_url, api_version, f"query?q={user_by_username_soql(username)}")
    logger.debug(f"GET {url}")
    return session.get(url, headers={"Accept": "application/json"})


def create_permission_set_assignment(
    session: requests.Session,
    base_url: str,
    user_id: str,
    permission_set_id: str,
    api_version: Optional[str] = None,
) -> requests.Response:
    url = rest_url(base_url, api_version, "sobjects/PermissionSetAssignment")
    logger.debug(f"POST {url}")
    return session.post(
        url,
        json={"AssigneeId": user_id, "PermissionSetId": permission_set_id},
        headers={"Accept": "application/json"},
    )


def is_duplicate_assignment(errors: Any) -> bool:
    """True when a 400 error body says the assignment already exists"""
    if errors is None:
        return False
    if not isinstance(errors, list):
        errors = [errors]
    for error in errors:
        if not isinstance(error, dict):
            continue
        if error.get("errorCode") == DUPLICATE_VALUE:
            return True
        if "duplicate" in str(error.get("message") or "").lower():
            return True
    return False


def first_error_message(errors: Any) -> str:
    if isinstance(errors, dict):
        errors = [errors]
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        return errors[0].get("message") or "Unknown error"
    return "Unknown error"
