import json
from json import JSONDecodeError


def json_or_none(response):
    """Returns the decoded body, or None if there is no JSON body"""
    try:
        return response.json()
    except (JSONDecodeError, ValueError):
        return None


def error_text_from_response(response) -> str:
    """Re-serialize a JSON error body so it reads on one line; fall back to the raw text"""
    body = json_or_none(response)
    if body is None:
        return response.text
    return json.dumps(body)


def status_line(response) -> str:
    return f"{response.status_code} {response.reason or ''}".rstrip()


def is_success(response) -> bool:
    """True only for 2xx; requests' Response.ok also accepts 3xx"""
    return 200 <= response.status_code < 300
