""" Execution context delivered by the host job framework.

The host passes every entry point a ``context`` mapping holding an
``environment`` mapping and a ``secrets`` mapping.  For local runs the same
shape can be loaded from a YAML file or from process environment variables.
"""
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel

from sfpermset.core.exceptions import AddressNotConfigured, ContextError

SECRET_NAMES = (
    "BEARER_AUTH_TOKEN",
    "BASIC_USERNAME",
    "BASIC_PASSWORD",
    "OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN",
    "OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET",
)
ENVIRONMENT_NAMES = (
    "ADDRESS",
    "OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL",
    "OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID",
    "OAUTH2_CLIENT_CREDENTIALS_SCOPE",
    "OAUTH2_CLIENT_CREDENTIALS_AUDIENCE",
    "OAUTH2_CLIENT_CREDENTIALS_AUTH_STYLE",
)
NO_ADDRESS_ERR = (
    "No URL specified. Provide address parameter or ADDRESS environment variable"
)


class ActionContext(BaseModel):
    environment: Dict[str, str] = {}
    secrets: Dict[str, str] = {}

    @classmethod
    def parse(cls, context: Union["ActionContext", Mapping, None]) -> "ActionContext":
        """Accepts whatever the host handed us and returns an ActionContext"""
        if isinstance(context, cls):
            return context
        context = context or {}
        return cls(
            environment=_drop_unset(context.get("environment")),
            secrets=_drop_unset(context.get("secrets")),
        )

    @classmethod
    def from_environ(cls, environ: Optional[Mapping] = None) -> "ActionContext":
        environ = os.environ if environ is None else environ
        return cls(
            environment={k: environ[k] for k in ENVIRONMENT_NAMES if environ.get(k)},
            secrets={k: environ[k] for k in SECRET_NAMES if environ.get(k)},
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ActionContext":
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ContextError(f"Could not read context file {path}: {e}")
        except yaml.YAMLError as e:
            raise ContextError(f"Could not parse context file {path}: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ContextError(
                f"Context file {path} must contain a mapping with environment and secrets keys"
            )
        return cls.parse(data)


def get_base_url(params: Optional[Mapping], context: ActionContext) -> str:
    """Returns the Salesforce base URL, preferring the address param over ADDRESS"""
    address = (params or {}).get("address") or context.environment.get("ADDRESS")
    if not address:
        raise AddressNotConfigured(NO_ADDRESS_ERR)

    return address[:-1] if address.endswith("/") else address


def _drop_unset(values: Optional[Mapping]) -> Dict[str, str]:
    return {k: str(v) for k, v in (values or {}).items() if v is not None}
