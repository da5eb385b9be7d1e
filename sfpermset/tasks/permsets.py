from typing import Any, Mapping, Optional

from sfpermset.core.action import HALTED, BaseAction, utc_timestamp
from sfpermset.core.context import get_base_url
from sfpermset.core.exceptions import SalesforceApiError, UserNotFound
from sfpermset.oauth.auth import get_authorization_header
from sfpermset.salesforce_api.rest import (
    DEFAULT_API_VERSION,
    SalesforceSession,
    create_permission_set_assignment,
    find_user_by_username,
    first_error_message,
    is_duplicate_assignment,
)
from sfpermset.utils.http.requests_utils import is_success, json_or_none, status_line


class AddUserToPermissionSet(BaseAction):
    action_docs = """
Assigns the Permission Set ``permissionSetId`` to the user whose Username is ``username``. An assignment that already exists is treated as success.
    """

    action_options = {
        "username": {
            "description": "Username of the target Salesforce user.",
            "required": True,
        },
        "permissionSetId": {
            "description": "Id of the Permission Set to assign.",
            "required": True,
        },
        "address": {
            "description": "Salesforce API base URL. Defaults to the ADDRESS environment value."
        },
        "apiVersion": {
            "description": f"Salesforce REST API version. Defaults to {DEFAULT_API_VERSION}."
        },
    }

    def _log_begin(self):
        self.logger.info("Starting Salesforce permission set assignment")

    def _run_action(self):
        username = self.options["username"]
        permission_set_id = self.options["permissionSetId"]
        api_version = self.options.get("apiVersion") or DEFAULT_API_VERSION

        base_url = get_base_url(self.options, self.context)
        session = SalesforceSession(get_authorization_header(self.context))

        self.logger.info(
            f"Adding user {username} to permission set {permission_set_id}"
        )

        self.logger.info("Step 1: Finding user by username")
        user_id = self._find_user_id(session, base_url, username, api_version)
        self.logger.info(f"Found user ID: {user_id}")

        self.logger.info("Step 2: Creating permission set assignment")
        assignment_id = self._assign(
            session, base_url, user_id, permission_set_id, api_version
        )

        self.logger.info(
            f"Successfully processed permission set assignment for user {username}"
        )
        self.return_values = {
            "status": "success",
            "username": username,
            "userId": user_id,
            "permissionSetId": permission_set_id,
            "assignmentId": assignment_id,
            "address": base_url,
        }

    def _find_user_id(self, session, base_url, username, api_version):
        response = find_user_by_username(session, base_url, username, api_version)
        if not is_success(response):
            raise SalesforceApiError(
                f"Failed to query user {username}: {status_line(response)}",
                status_code=response.status_code,
                response=response,
            )

        result = json_or_none(response) or {}
        records = result.get("records") if isinstance(result, dict) else None
        user_id = None
        if records and isinstance(records[0], dict):
            user_id = records[0].get("Id")
        if not user_id:
            raise UserNotFound(f"User not found: {username}")
        return user_id

    def _assign(
        self, session, base_url, user_id, permission_set_id, api_version
    ) -> Optional[str]:
        response = create_permission_set_assignment(
            session, base_url, user_id, permission_set_id, api_version
        )

        if response.status_code == 201:
            result = json_or_none(response)
            assignment_id = result.get("id") if isinstance(result, dict) else None
            self.logger.info(
                f"Successfully created permission set assignment: {assignment_id}"
            )
            return assignment_id

        if response.status_code == 400:
            errors = json_or_none(response)
            if is_duplicate_assignment(errors):
                self.logger.info(
                    "User already has this permission set - treating as success"
                )
                return None
            raise SalesforceApiError(
                f"Failed to create permission set assignment: {first_error_message(errors)}",
                status_code=400,
                response=response,
            )

        raise SalesforceApiError(
            f"Failed to create permission set assignment: {status_line(response)}",
            status_code=response.status_code,
            response=response,
        )

    def _description(self):
        return "permission set assignment"

    def halt(self):
        username = self.params.get("username") or "unknown"
        reason = self.params.get("reason")
        self.logger.info(
            f"Permission set assignment halted ({reason}) for user {username}"
        )
        return {
            "status": HALTED,
            "username": username,
            "reason": reason,
            "halted_at": utc_timestamp(),
        }


def invoke(params: Mapping, context: Any = None) -> dict:
    """Host entry point: adds the user to the permission set"""
    return AddUserToPermissionSet(params, context).invoke()


def error(params: Mapping, context: Any = None) -> dict:
    """Host entry point: retry or fail after an invoke error"""
    return AddUserToPermissionSet(params, context).error()


def halt(params: Mapping, context: Any = None) -> dict:
    """Host entry point: graceful shutdown"""
    return AddUserToPermissionSet(params, context).halt()
