"""
Web Key Directory resolver.

Looks up an OpenPGP certificate for an email address over HTTPS, following
the OpenPGP Web Key Directory convention:

    advanced: https://openpgpkey.<domain>/.well-known/openpgpkey/<domain>/hu/<hash>?l=<local>
    direct:   https://<domain>/.well-known/openpgpkey/hu/<hash>?l=<local>

where <hash> is the z-base-32 encoded SHA-1 of the lowercased local part.
"""

from typing import Literal

import httpx
from loguru import logger

from pgp_expiration.domain.services.credential_resolver import CredentialResolver
from pgp_expiration.models.errors import (
    AddressParseError,
    LookupUrlError,
    RequestFailedError,
    ResponseBodyError,
    ServerStatusError,
)
from pgp_expiration.utils.zbase32 import wkd_hash

WKDVariant = Literal["advanced", "direct"]

WKD_SUBDOMAIN = "openpgpkey"


class WKDResolver(CredentialResolver):
    """
    Web Key Directory lookup over a shared httpx client.

    The client is owned by the caller so that concurrent lookups share
    one connection pool and one timeout configuration.
    """

    def __init__(self, client: httpx.AsyncClient, variant: WKDVariant = "advanced"):
        """
        Initializes the resolver.

        Args:
            client: HTTP client used for every lookup
            variant: Lookup method ("advanced" or "direct")
        """
        if variant not in ("advanced", "direct"):
            raise ValueError(f"Unsupported WKD variant: {variant}")

        self.client = client
        self.variant = variant

    @property
    def method_name(self) -> str:
        """Lookup method identifier."""
        return f"wkd-{self.variant}"

    @staticmethod
    def split_address(email: str) -> tuple[str, str]:
        """
        Splits an email address into local part and domain.

        Args:
            email: Email address

        Returns:
            Tuple (local_part, domain)

        Raises:
            AddressParseError: If the text is not a single addr-spec
        """
        if email.count("@") != 1:
            raise AddressParseError(f"{email!r} is not an email address")

        local_part, domain = email.split("@")
        if not local_part or not domain:
            raise AddressParseError(f"{email!r} is not an email address")
        if any(char.isspace() for char in email):
            raise AddressParseError(f"{email!r} contains whitespace")

        return local_part, domain

    def build_url(self, email: str) -> str:
        """
        Builds the WKD lookup URL for an email address.

        Args:
            email: Email address

        Returns:
            Lookup URL

        Raises:
            AddressParseError: If the address cannot be parsed
            LookupUrlError: If the domain cannot be used in a URL
        """
        local_part, domain = self.split_address(email)

        try:
            ascii_domain = domain.encode("idna").decode("ascii").lower()
        except UnicodeError as e:
            raise LookupUrlError(f"invalid domain {domain!r}: {e}") from e

        hashed = wkd_hash(local_part)
        if self.variant == "advanced":
            base = (
                f"https://{WKD_SUBDOMAIN}.{ascii_domain}"
                f"/.well-known/openpgpkey/{ascii_domain}/hu/{hashed}"
            )
        else:
            base = f"https://{ascii_domain}/.well-known/openpgpkey/hu/{hashed}"

        try:
            url = httpx.URL(base, params={"l": local_part})
        except httpx.InvalidURL as e:
            raise LookupUrlError(e) from e

        return str(url)

    async def fetch(self, email: str) -> bytes:
        """
        Downloads the certificate published for an email address.

        Args:
            email: Email address

        Returns:
            Raw response body

        Raises:
            AddressParseError: If the address cannot be parsed
            LookupUrlError: If no URL can be built
            RequestFailedError: If the request cannot be sent
            ServerStatusError: If the server answers with a non-2xx status
            ResponseBodyError: If the body cannot be read
        """
        url = self.build_url(email)
        logger.debug(f"Fetching certificate from {url}")

        try:
            async with self.client.stream("GET", url) as response:
                try:
                    response.raise_for_status()
                except httpx.HTTPStatusError as e:
                    raise ServerStatusError(
                        f"HTTP status {response.status_code} for url ({url})"
                    ) from e

                try:
                    body = await response.aread()
                except httpx.HTTPError as e:
                    raise ResponseBodyError(e) from e
        except httpx.HTTPError as e:
            raise RequestFailedError(e) from e

        logger.debug(f"Received {len(body)} bytes from {url}")
        return body
