"""
Variable substitution service for replacing {{variable}} placeholders.

This service handles extraction and substitution of variable placeholders
in request templates (URL, headers, query params, body, auth fields).
Two kinds of placeholder exist:

- ``{{$name}}`` dynamic variables, generated fresh on every use
- ``{{name}}`` environment variables, looked up in the active environment

Resolution never fails: a placeholder without a value is left verbatim.
"""

import logging
import re
from typing import Any, List

from ..schemas.environment import Environment
from .dynamic_variables import DynamicGeneratorRegistry, default_registry


logger = logging.getLogger(__name__)

# Pattern to match {{$path}} dynamic placeholders
DYNAMIC_PATTERN = re.compile(r"\{\{\$([^{}\s]+)\}\}")

# Pattern to match any well-formed {{name}} or {{$name}} placeholder
VARIABLE_PATTERN = re.compile(r"\{\{(\$?[^{}\s]+)\}\}")

# Two or more slashes not preceded by a scheme colon
SLASH_RUN_PATTERN = re.compile(r"([^:])//+")


def extract_variables(template: str) -> List[str]:
    """
    Extract all placeholder names from a template string.

    Dynamic variables keep their ``$`` prefix.

    Example:
        >>> extract_variables("{{base}}/users/{{$guid}}")
        ['base', '$guid']
    """
    if not template:
        return []

    return VARIABLE_PATTERN.findall(template)


def find_unresolved(text: str) -> List[str]:
    """Names of placeholders still present in an already resolved string."""
    return extract_variables(text)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _environment_values(environment: Environment) -> dict[str, str]:
    values: dict[str, str] = {}
    for variable in environment.variables:
        key = variable.key
        if not key or any(ch.isspace() for ch in key):
            continue
        values[key] = _to_text(variable.value)
    return values


def resolve(
    text: str,
    environment: Environment | None = None,
    registry: DynamicGeneratorRegistry | None = None,
) -> str:
    """
    Expand placeholders in a template string.

    Dynamic variables are expanded first, then environment variables in
    list order (a later duplicate key wins). Finally runs of slashes are
    collapsed, except directly after a scheme colon, so that templated
    path segments like ``{{base}}/{{path}}`` don't produce ``//``.

    Args:
        text: Template string
        environment: Active environment snapshot, or None
        registry: Dynamic variable registry; the default one if None

    Returns:
        The resolved string. Unresolvable placeholders are kept as-is.

    Example:
        >>> env = Environment(variables=[Variable(key="id", value=42)])
        >>> resolve("https://api.test/{{id}}", env)
        'https://api.test/42'
    """
    if not text:
        return text

    result = text

    if "{{$" in result:
        generators = registry or default_registry()

        def replace_dynamic(match: re.Match) -> str:
            value = generators.resolve(match.group(1))
            if value is None:
                logger.debug("Unresolved dynamic variable: %s", match.group(0))
                return match.group(0)
            return value

        result = DYNAMIC_PATTERN.sub(replace_dynamic, result)

    if environment is not None and environment.variables:
        for key, value in _environment_values(environment).items():
            result = result.replace("{{" + key + "}}", value)

    return SLASH_RUN_PATTERN.sub(r"\1/", result)


def resolve_dict(
    data: dict[str, str],
    environment: Environment | None = None,
    registry: DynamicGeneratorRegistry | None = None,
) -> dict[str, str]:
    """Resolve placeholders in all values of a dictionary."""
    return {key: resolve(value, environment, registry) for key, value in data.items()}
