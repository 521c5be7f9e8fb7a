"""
Authentication injection for assembled requests.

Auth is applied after the request's own headers and params are folded,
so an auth value replaces an explicit header or param of the same name.
"""

import base64

from ..schemas.request import AuthData, AuthType


def basic_credentials(username: str, password: str) -> str:
    """Base64 of ``username:password`` as used in a Basic Authorization header."""
    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


def apply_auth(
    headers: dict[str, str],
    params: dict[str, str],
    auth_type: AuthType,
    auth_data: AuthData,
) -> None:
    """
    Add authentication to the header and query param maps in place.

    Incomplete auth data (an empty token, a missing password, ...) leaves
    both maps untouched.

    Args:
        headers: Header map to modify
        params: Query param map to modify
        auth_type: One of none, bearer, basic, api-key
        auth_data: Credentials for the auth type
    """
    if auth_type == "bearer":
        if auth_data.token:
            headers["Authorization"] = f"Bearer {auth_data.token}"
    elif auth_type == "basic":
        if auth_data.username and auth_data.password:
            headers["Authorization"] = "Basic " + basic_credentials(
                auth_data.username, auth_data.password
            )
    elif auth_type == "api-key":
        if auth_data.key and auth_data.value:
            if auth_data.add_to == "header":
                headers[auth_data.key] = auth_data.value
            else:
                params[auth_data.key] = auth_data.value
