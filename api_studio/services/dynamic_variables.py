"""
Dynamic variable generators for ``{{$name}}`` placeholders.

A dynamic variable produces a fresh value every time it is resolved:
``{{$guid}}`` twice in one template yields two different UUIDs. Names are
looked up in a closed alias table first (``$guid``, ``$randomEmail``, ...)
and then as a dotted path into a closed fake-data namespace
(``$person.firstName``, ``$internet.email``, ...) backed by Faker.
"""

import logging
import random
import time
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable

from faker import Faker

from ..exceptions import GeneratorRegistryError


logger = logging.getLogger(__name__)

Generator = Callable[[], Any]


# Dotted-path namespace: segment -> Faker provider method name
NAMESPACES: dict[str, dict[str, str]] = {
    "person": {
        "firstName": "first_name",
        "lastName": "last_name",
        "fullName": "name",
        "prefix": "prefix",
        "suffix": "suffix",
        "jobTitle": "job",
    },
    "internet": {
        "email": "email",
        "userName": "user_name",
        "password": "password",
        "url": "url",
        "domainName": "domain_name",
        "ip": "ipv4",
        "ipv6": "ipv6",
        "mac": "mac_address",
        "userAgent": "user_agent",
    },
    "phone": {
        "number": "phone_number",
    },
    "location": {
        "city": "city",
        "country": "country",
        "countryCode": "country_code",
        "streetAddress": "street_address",
        "zipCode": "postcode",
        "latitude": "latitude",
        "longitude": "longitude",
    },
    "lorem": {
        "word": "word",
        "sentence": "sentence",
        "paragraph": "paragraph",
        "text": "text",
    },
    "company": {
        "name": "company",
        "catchPhrase": "catch_phrase",
    },
    "finance": {
        "currencyCode": "currency_code",
        "accountNumber": "bban",
        "iban": "iban",
        "creditCardNumber": "credit_card_number",
    },
    "date": {
        "iso": "iso8601",
        "month": "month_name",
        "weekday": "day_of_week",
    },
    "string": {
        "uuid": "uuid4",
    },
    "datatype": {
        "boolean": "pybool",
        "number": "random_int",
    },
}


def _iso_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def default_aliases(fake: Faker) -> dict[str, Generator]:
    """The named generators available as ``{{$<name>}}``."""
    return {
        "guid": lambda: str(uuid.uuid4()),
        "timestamp": lambda: int(time.time()),
        "isoTimestamp": _iso_timestamp,
        "randomInt": lambda: random.randint(0, 1000),
        "randomUUID": lambda: str(uuid.uuid4()),
        "randomBoolean": lambda: random.random() < 0.5,
        # person
        "randomFirstName": fake.first_name,
        "randomLastName": fake.last_name,
        "randomFullName": fake.name,
        "randomUserName": fake.user_name,
        "randomJobTitle": fake.job,
        # contact
        "randomEmail": fake.email,
        "randomPhoneNumber": fake.phone_number,
        # location
        "randomCity": fake.city,
        "randomCountry": fake.country,
        "randomStreetAddress": fake.street_address,
        # lorem
        "randomLoremWord": fake.word,
        "randomLoremSentence": fake.sentence,
        "randomLoremParagraph": fake.paragraph,
        # network
        "randomIP": fake.ipv4,
        "randomIPV6": fake.ipv6,
        "randomUrl": fake.url,
        "randomDomainName": fake.domain_name,
        "randomMACAddress": fake.mac_address,
        # finance
        "randomPrice": lambda: f"{random.uniform(1, 1000):.2f}",
        "randomCurrencyCode": fake.currency_code,
        "randomBankAccount": fake.bban,
        "randomCompanyName": fake.company,
    }


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class DynamicGeneratorRegistry:
    """
    Closed table of dynamic variable generators.

    Args:
        fake: Faker instance backing the fake-data generators
        aliases: Override for the alias table (name -> zero-arg callable)
        namespaces: Override for the dotted-path namespace table
    """

    def __init__(
        self,
        fake: Faker | None = None,
        aliases: Mapping[str, Generator] | None = None,
        namespaces: Mapping[str, Mapping[str, str]] | None = None,
    ):
        self.fake = fake or Faker()
        self._aliases = dict(aliases) if aliases is not None else default_aliases(self.fake)
        self._namespace = self._build_namespace(NAMESPACES if namespaces is None else namespaces)

    def _build_namespace(self, table: Mapping[str, Mapping[str, str]]) -> dict[str, dict[str, Any]]:
        namespace: dict[str, dict[str, Any]] = {}
        for group, fields in table.items():
            namespace[group] = {}
            for field, provider in fields.items():
                try:
                    namespace[group][field] = getattr(self.fake, provider)
                except AttributeError as exc:
                    raise GeneratorRegistryError(
                        f"Unknown fake-data provider {provider!r} for {group}.{field}"
                    ) from exc
        return namespace

    @property
    def names(self) -> list[str]:
        """Alias names, without the ``$`` prefix."""
        return sorted(self._aliases)

    def validate(self) -> "DynamicGeneratorRegistry":
        """
        Check that every table entry can be invoked.

        Raises:
            GeneratorRegistryError: If an alias or namespace entry is not callable
        """
        for name, generator in self._aliases.items():
            if not name or "." in name or not callable(generator):
                raise GeneratorRegistryError(f"Invalid dynamic variable {name!r}")
        for group, fields in self._namespace.items():
            for field, generator in fields.items():
                if not callable(generator):
                    raise GeneratorRegistryError(f"Invalid dynamic variable {group}.{field}")
        return self

    def resolve(self, alias_path: str) -> str | None:
        """
        Generate a value for a dynamic variable.

        Args:
            alias_path: Alias name or dotted path, with or without a leading ``$``

        Returns:
            A freshly generated string, or None if the name is unknown

        Example:
            >>> registry.resolve("$person.firstName")
            'Maria'
        """
        path = alias_path[1:] if alias_path.startswith("$") else alias_path
        if not path:
            return None

        generator = self._aliases.get(path)
        if generator is None:
            node: Any = self._namespace
            for segment in path.split("."):
                if not isinstance(node, Mapping) or segment not in node:
                    return None
                node = node[segment]
            if isinstance(node, Mapping):
                return None
            if not callable(node):
                return _stringify(node)
            generator = node

        try:
            return _stringify(generator())
        except Exception:
            logger.warning("Dynamic variable $%s failed to generate", path, exc_info=True)
            return None


@lru_cache(maxsize=1)
def default_registry() -> DynamicGeneratorRegistry:
    """Process-wide registry used when callers don't supply one."""
    return DynamicGeneratorRegistry()
