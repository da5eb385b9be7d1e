import base64
import logging
from typing import Dict, Optional, Union

import requests
from pydantic import BaseModel

from sfpermset.oauth.exceptions import OAuth2ConfigError, OAuth2Error
from sfpermset.utils.http.requests_utils import (
    error_text_from_response,
    is_success,
    json_or_none,
    status_line,
)

logger = logging.getLogger(__name__)

HTTP_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}
CLIENT_CREDENTIALS_GRANT_TYPE = "client_credentials"
AUTH_STYLE_IN_PARAMS = "InParams"
AUTH_STYLE_IN_HEADER = "InHeader"
MISSING_CONFIG_ERR = (
    "OAuth2 Client Credentials flow requires tokenUrl, clientId, and clientSecret"
)


def basic_credentials(username: str, password: str) -> str:
    """Returns the base64 user:pass pair used by HTTP Basic auth"""
    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


class ClientCredentialsConfig(BaseModel):
    token_url: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    scope: Optional[str] = None
    audience: Optional[str] = None
    auth_style: Optional[str] = None


def get_client_credentials_token(
    config: Union[ClientCredentialsConfig, Dict],
    session: Optional[requests.Session] = None,
) -> str:
    """Completes the OAuth2 client credentials grant and returns the access token.
    For more info on the flow see:
    https://www.oauth.com/oauth2-servers/access-tokens/client-credentials/

    With ``auth_style`` "InParams" the client id and secret are sent in the
    form body; otherwise they are sent as an HTTP Basic Authorization header.
    """
    if isinstance(config, dict):
        config = ClientCredentialsConfig(**config)
    if not (config.token_url and config.client_id and config.client_secret):
        raise OAuth2ConfigError(MISSING_CONFIG_ERR)

    data = {"grant_type": CLIENT_CREDENTIALS_GRANT_TYPE}
    if config.scope:
        data["scope"] = config.scope
    if config.audience:
        data["audience"] = config.audience

    headers = dict(HTTP_HEADERS)
    if config.auth_style == AUTH_STYLE_IN_PARAMS:
        data["client_id"] = config.client_id
        data["client_secret"] = config.client_secret
    else:
        headers["Authorization"] = "Basic " + basic_credentials(
            config.client_id, config.client_secret
        )

    logger.debug(f"Requesting client credentials token from {config.token_url}")
    response = (session or requests).post(config.token_url, headers=headers, data=data)
    if not is_success(response):
        raise OAuth2Error(
            f"OAuth2 token request failed: {status_line(response)} - {error_text_from_response(response)}",
            response=response,
        )

    token_info = json_or_none(response) or {}
    access_token = token_info.get("access_token") if isinstance(token_info, dict) else None
    if not access_token:
        raise OAuth2Error("No access_token in OAuth2 response", response=response)
    return access_token
