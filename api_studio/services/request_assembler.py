"""
Request assembly: turn a templated request definition into a wire request.

Assembly never fails. Placeholders without a value stay in the output, and
a body declared as JSON that doesn't parse is sent as plain text.
"""

import json
import logging

from ..schemas.environment import Environment
from ..schemas.execute import WireRequest
from ..schemas.request import BODY_METHODS, AuthData, KeyValue, RequestDefinition
from .auth import apply_auth
from .dynamic_variables import DynamicGeneratorRegistry
from .variable_substitution import resolve, resolve_dict


logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant {name}")


def fold_pairs(
    pairs: list[KeyValue],
    environment: Environment | None = None,
    registry: DynamicGeneratorRegistry | None = None,
) -> dict[str, str]:
    """Active rows with a key, values resolved; a later duplicate key wins."""
    folded = {pair.key: pair.value for pair in pairs if pair.active and pair.key}
    return resolve_dict(folded, environment, registry)


def resolve_auth_data(
    auth_data: AuthData,
    environment: Environment | None = None,
    registry: DynamicGeneratorRegistry | None = None,
) -> AuthData:
    """Copy of ``auth_data`` with every credential field resolved."""
    return auth_data.model_copy(update={
        "token": resolve(auth_data.token, environment, registry),
        "username": resolve(auth_data.username, environment, registry),
        "password": resolve(auth_data.password, environment, registry),
        "key": resolve(auth_data.key, environment, registry),
        "value": resolve(auth_data.value, environment, registry),
    })


def body_allowed(method: str, allow_delete_body: bool = False) -> bool:
    """Whether a body is sent for ``method``."""
    if method in BODY_METHODS:
        return True
    return allow_delete_body and method == "DELETE"


def assemble(
    definition: RequestDefinition,
    environment: Environment | None = None,
    *,
    registry: DynamicGeneratorRegistry | None = None,
    allow_delete_body: bool = False,
) -> WireRequest:
    """
    Build the wire request for a definition.

    Args:
        definition: The templated request
        environment: Active environment snapshot, or None
        registry: Dynamic variable registry; the default one if None
        allow_delete_body: Also send a body with DELETE

    Returns:
        The resolved WireRequest
    """
    url = resolve(definition.url, environment, registry)
    params = fold_pairs(definition.params, environment, registry)
    headers = fold_pairs(definition.headers, environment, registry)

    apply_auth(
        headers,
        params,
        definition.auth_type,
        resolve_auth_data(definition.auth_data, environment, registry),
    )

    body = None
    if (
        definition.body_type != "none"
        and definition.body
        and body_allowed(definition.method, allow_delete_body)
    ):
        body = resolve(definition.body, environment, registry)
        if definition.is_json_body():
            try:
                body = json.loads(body, parse_constant=_reject_constant)
            except ValueError:
                logger.debug("Body of %s is not valid JSON, sending as text", definition.id)
            else:
                headers["Content-Type"] = "application/json"

    return WireRequest(
        method=definition.method,
        url=url,
        headers=headers,
        params=params,
        body=body,
    )
