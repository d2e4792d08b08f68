"""
BCE Cloud Python SDK - Request Authentication

This module holds the credential type and the ``bce-auth-v1`` signer.

The authorization header has the form::

    bce-auth-v1/{accessKeyId}/{timestamp}/{expirationSeconds}/{signedHeaders}/{signature}

where the signing key is the hex HMAC-SHA256 of the first four fields
under the secret key, and the signature is the hex HMAC-SHA256 of the
canonical request under that signing key.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

from bcecloud.canonical import CanonicalRequest
from bcecloud.exceptions import SigningError

AUTH_VERSION = "bce-auth-v1"
SECURITY_TOKEN_HEADER = "x-bce-security-token"
DATE_HEADER = "x-bce-date"


def format_timestamp(moment: datetime) -> str:
    """
    Format an instant as ``YYYY-MM-DDTHH:MM:SSZ``.

    Sub-second precision is dropped. Naive datetimes are taken as UTC,
    aware ones are converted to UTC first.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class Credential:
    """
    Access key pair used to sign requests.

    Attributes:
        access_key_id: Public access key identifier
        secret_access_key: Secret key, never included in repr
        session_token: Optional STS session token
    """
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class SigningContext:
    """Per-request signing window. Build a new one for every dispatch."""
    timestamp: datetime
    expiration_seconds: int
    signed_header_names: Tuple[str, ...] = ()

    @classmethod
    def for_request(
        cls,
        canonical: CanonicalRequest,
        timestamp: datetime,
        expiration_seconds: int,
    ) -> "SigningContext":
        return cls(
            timestamp=timestamp,
            expiration_seconds=expiration_seconds,
            signed_header_names=canonical.signed_header_names,
        )


class Signer:
    """
    Produces ``authorization`` header values for a credential.

    A Signer holds nothing but the read-only credential, so one instance
    can sign any number of concurrent requests.

    Example:
        >>> signer = Signer(Credential("AK", "SK"))
        >>> canonical = build_canonical_request("GET", "/", headers={"host": "bj.bcebos.com"})
        >>> context = SigningContext.for_request(canonical, datetime.now(timezone.utc), 1800)
        >>> signer.sign(context, canonical)
        'bce-auth-v1/AK/.../1800/host/...'
    """

    def __init__(self, credential: Credential) -> None:
        self._credential = credential

    @property
    def credential(self) -> Credential:
        return self._credential

    def _validate(self, context: SigningContext) -> None:
        access_key_id = self._credential.access_key_id
        if not access_key_id or "/" in access_key_id:
            raise SigningError("Access key id must be a non-empty string without '/'")
        if not self._credential.secret_access_key:
            raise SigningError("Secret access key is required")

        expiration = context.expiration_seconds
        # bool is an int subclass; reject it along with floats and strings
        if isinstance(expiration, bool) or not isinstance(expiration, int):
            raise SigningError(
                f"Expiration must be an integer number of seconds, got {expiration!r}"
            )
        if expiration <= 0:
            raise SigningError(f"Expiration must be positive, got {expiration}")

    def auth_string_prefix(self, context: SigningContext) -> str:
        """Build the signing-key input string."""
        return "/".join([
            AUTH_VERSION,
            self._credential.access_key_id,
            format_timestamp(context.timestamp),
            str(context.expiration_seconds),
        ])

    def signing_key(self, context: SigningContext) -> str:
        """Derive the hex signing key for a signing window."""
        self._validate(context)
        return hmac.new(
            self._credential.secret_access_key.encode("utf-8"),
            self.auth_string_prefix(context).encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def signature(self, context: SigningContext, canonical: CanonicalRequest) -> str:
        """Compute the hex signature of a canonical request."""
        return hmac.new(
            self.signing_key(context).encode("utf-8"),
            canonical.string.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def sign(self, context: SigningContext, canonical: CanonicalRequest) -> str:
        """
        Compose the authorization header value.

        Args:
            context: Signing window for this request
            canonical: Canonical form of the request being sent

        Returns:
            The ``authorization`` header value

        Raises:
            SigningError: If the credential or expiration window is invalid
        """
        signature = self.signature(context, canonical)
        return "/".join([
            self.auth_string_prefix(context),
            ";".join(context.signed_header_names),
            signature,
        ])
