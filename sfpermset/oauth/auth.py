""" Picks the Authorization header for Salesforce calls.

Supported, in order of precedence:
    (1) Bearer token             - BEARER_AUTH_TOKEN
    (2) Basic auth               - BASIC_USERNAME / BASIC_PASSWORD
    (3) OAuth2 authorization code - OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN
    (4) OAuth2 client credentials - OAUTH2_CLIENT_CREDENTIALS_*
"""
import logging
from typing import Optional

import requests

from sfpermset.core.context import ActionContext
from sfpermset.core.exceptions import AuthenticationNotConfigured
from sfpermset.oauth.client import (
    ClientCredentialsConfig,
    basic_credentials,
    get_client_credentials_token,
)
from sfpermset.oauth.exceptions import OAuth2ConfigError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
NO_AUTH_ERR = (
    "No authentication configured. Provide one of: "
    "BEARER_AUTH_TOKEN, BASIC_USERNAME/BASIC_PASSWORD, "
    "OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN, or OAUTH2_CLIENT_CREDENTIALS_*"
)
CLIENT_CREDENTIALS_ENV_ERR = (
    "OAuth2 Client Credentials flow requires TOKEN_URL and CLIENT_ID in env"
)


def as_bearer(token: str) -> str:
    return token if token.startswith(BEARER_PREFIX) else f"{BEARER_PREFIX}{token}"


def get_authorization_header(
    context: ActionContext, session: Optional[requests.Session] = None
) -> str:
    env = context.environment
    secrets = context.secrets

    if secrets.get("BEARER_AUTH_TOKEN"):
        logger.debug("Using bearer token authentication")
        return as_bearer(secrets["BEARER_AUTH_TOKEN"])

    if secrets.get("BASIC_PASSWORD") and secrets.get("BASIC_USERNAME"):
        logger.debug("Using basic authentication")
        return "Basic " + basic_credentials(
            secrets["BASIC_USERNAME"], secrets["BASIC_PASSWORD"]
        )

    if secrets.get("OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN"):
        logger.debug("Using OAuth2 authorization code access token")
        return as_bearer(secrets["OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN"])

    if secrets.get("OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET"):
        token_url = env.get("OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL")
        client_id = env.get("OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID")
        if not token_url or not client_id:
            raise OAuth2ConfigError(CLIENT_CREDENTIALS_ENV_ERR)

        logger.debug("Using OAuth2 client credentials")
        token = get_client_credentials_token(
            ClientCredentialsConfig(
                token_url=token_url,
                client_id=client_id,
                client_secret=secrets["OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET"],
                scope=env.get("OAUTH2_CLIENT_CREDENTIALS_SCOPE"),
                audience=env.get("OAUTH2_CLIENT_CREDENTIALS_AUDIENCE"),
                auth_style=env.get("OAUTH2_CLIENT_CREDENTIALS_AUTH_STYLE"),
            ),
            session=session,
        )
        return f"{BEARER_PREFIX}{token}"

    raise AuthenticationNotConfigured(NO_AUTH_ERR)
