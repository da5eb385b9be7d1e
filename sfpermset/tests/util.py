from sfpermset.core.context import ActionContext

ADDRESS = "https://test.my.salesforce.com"
API_VERSION = "v61.0"
QUERY_URL = f"{ADDRESS}/services/data/{API_VERSION}/query"
ASSIGNMENT_URL = f"{ADDRESS}/services/data/{API_VERSION}/sobjects/PermissionSetAssignment"
TOKEN_URL = "https://login.example.com/oauth2/token"


def create_context(environment=None, secrets=None, address=ADDRESS):
    environment = dict(environment or {})
    if address is not None:
        environment.setdefault("ADDRESS", address)
    return ActionContext(environment=environment, secrets=dict(secrets or {}))


def user_query_result(*user_ids):
    return {
        "done": True,
        "totalSize": len(user_ids),
        "records": [
            {"attributes": {"type": "User"}, "Id": user_id} for user_id in user_ids
        ],
    }
