"""
cURL export and import for request definitions.

Export renders the request the way it would be sent, with placeholders
resolved and auth applied. Import understands the flags browsers and API
docs commonly emit; anything else is ignored.
"""

import json
import re
from urllib.parse import urlencode

import httpx

from ..exceptions import CurlParseError
from ..schemas.environment import Environment
from ..schemas.request import KeyValue, RequestDefinition
from .dynamic_variables import DynamicGeneratorRegistry
from .request_assembler import assemble


# Double-quoted, single-quoted, or bare words
TOKEN_PATTERN = re.compile(r"\"([^\"]*)\"|'([^']*)'|[^\s\"']+")

LINE_CONTINUATION_PATTERN = re.compile(r"\\\s*")

DATA_FLAGS = ("-d", "--data", "--data-raw", "--data-binary")
IGNORED_FLAGS = ("-L", "--location", "--compressed")


def _double_quote(value: str) -> str:
    escaped = re.sub(r'([\\"$`])', r"\\\1", value)
    return f'"{escaped}"'


def _single_quote(value: str) -> str:
    return "'" + value.replace("'", "'\\''") + "'"


def build_curl(
    definition: RequestDefinition,
    environment: Environment | None = None,
    registry: DynamicGeneratorRegistry | None = None,
) -> str:
    """
    Render a request definition as a cURL command.

    DELETE requests keep their body, unlike a regular send.

    Example:
        >>> build_curl(RequestDefinition(method="GET", url="https://api.example.com/data"))
        'curl -X GET "https://api.example.com/data"'
    """
    wire = assemble(definition, environment, registry=registry, allow_delete_body=True)

    url = wire.url
    if wire.params:
        try:
            url = str(httpx.URL(url).copy_merge_params(wire.params))
        except httpx.InvalidURL:
            # Unresolved placeholders in host or port; keep the URL as written
            url += ("&" if "?" in url else "?") + urlencode(wire.params)

    lines = [f"curl -X {wire.method} {_double_quote(url)}"]

    headers = dict(wire.headers)
    if definition.is_json_body() and not any(k.lower() == "content-type" for k in headers):
        headers["Content-Type"] = "application/json"
    for key, value in headers.items():
        if value:
            lines.append(f"-H {_double_quote(f'{key}: {value}')}")

    if wire.body is not None:
        body = wire.body if isinstance(wire.body, str) else json.dumps(wire.body)
        lines.append(f"-d {_single_quote(body)}")

    return " \\\n  ".join(lines)


def tokenize(command: str) -> list[str]:
    """Split a shell-style command line into words, unquoting them."""
    normalized = LINE_CONTINUATION_PATTERN.sub(" ", command).strip()
    tokens = []
    for match in TOKEN_PATTERN.finditer(normalized):
        if match.group(1) is not None:
            tokens.append(match.group(1))
        elif match.group(2) is not None:
            tokens.append(match.group(2))
        else:
            tokens.append(match.group(0))
    return tokens


def parse_curl(command: str) -> RequestDefinition:
    """
    Build a request definition from a cURL command.

    A body turns a GET into a POST. The body is marked JSON when a JSON
    Content-Type header is present or the body looks like a JSON document,
    and plain raw text otherwise.

    Raises:
        CurlParseError: If the command has no http(s) URL
    """
    if not command or not command.strip():
        raise CurlParseError("Please enter a cURL command")

    tokens = tokenize(command)
    method = "GET"
    url = ""
    headers: list[KeyValue] = []
    body = ""
    json_body = False

    i = 0
    while i < len(tokens):
        token = tokens[i]
        following = tokens[i + 1] if i + 1 < len(tokens) else None

        if token == "curl" or token in IGNORED_FLAGS:
            pass
        elif token.startswith(("http://", "https://")):
            if not url:
                url = token
        elif token in ("-X", "--request"):
            if following:
                method = following.upper()
                i += 1
        elif token in ("-H", "--header"):
            if following:
                key, sep, value = following.partition(":")
                if sep:
                    key, value = key.strip(), value.strip()
                    headers.append(KeyValue(key=key, value=value))
                    if key.lower() == "content-type" and "json" in value.lower():
                        json_body = True
                i += 1
        elif token in DATA_FLAGS:
            if following:
                body = following
                if method == "GET":
                    method = "POST"
                if body.lstrip().startswith(("{", "[")):
                    json_body = True
                i += 1
        i += 1

    if not url:
        raise CurlParseError("Could not find URL in cURL command")

    if body:
        body_type, raw_type = "raw", ("JSON" if json_body else "Text")
    else:
        body_type, raw_type = "none", "JSON"

    try:
        return RequestDefinition(
            name=url,
            method=method,
            url=url,
            headers=headers,
            body_type=body_type,
            raw_type=raw_type,
            body=body,
        )
    except ValueError as e:
        raise CurlParseError(f"Unsupported cURL request: {e}") from e
