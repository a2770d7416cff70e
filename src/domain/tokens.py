"""
Identity tokens - Issue and validate signed, time-bounded account tokens.

Tokens are HS256 JWTs signed with a pre-shared secret:

    {
        "iss": <configured issuer>,
        "aud": <configured audience>,
        "sub": <account id>,
        "authenticated": false,
        "purpose": "activation" | "password_reset",
        "iat": <issued at, epoch seconds>,
        "exp": <iat + validity window>
    }

Expiry is checked against an injectable clock rather than PyJWT's own
wall-clock check, so tests can move time forward.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

import jwt

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
DEFAULT_VALIDITY = timedelta(hours=12)

PURPOSE_ACTIVATION = "activation"
PURPOSE_PASSWORD_RESET = "password_reset"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenSettings:
    """Signing configuration shared by issuer and validator."""

    secret: str
    issuer: str
    audience: str
    validity: timedelta = DEFAULT_VALIDITY

    def check(self) -> None:
        """
        Fail fast on unusable configuration.

        Raises:
            ConfigurationError: If secret, issuer or audience is blank
        """
        if not self.secret or not self.secret.strip():
            raise ConfigurationError("Token secret is not configured")
        if not self.issuer or not self.audience:
            raise ConfigurationError("Token issuer and audience must be configured")
        if self.validity <= timedelta(0):
            raise ConfigurationError("Token validity must be positive")


class TokenRejection(Enum):
    """Reason a token failed validation."""

    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    WRONG_ISSUER = "wrong_issuer"
    WRONG_AUDIENCE = "wrong_audience"
    MISSING_CLAIM = "missing_claim"
    EXPIRED = "expired"
    WRONG_PURPOSE = "wrong_purpose"


@dataclass(frozen=True)
class TokenCheck:
    """Outcome of TokenValidator.validate(): an account id or a rejection."""

    account_id: str | None = None
    rejection: TokenRejection | None = None

    @property
    def valid(self) -> bool:
        return self.account_id is not None and self.rejection is None


class TokenIssuer:
    """Creates signed identity tokens."""

    def __init__(self, settings: TokenSettings, clock: Clock = utc_now) -> None:
        settings.check()
        self._settings = settings
        self._clock = clock

    def issue(self, account_id: str, purpose: str = PURPOSE_ACTIVATION) -> str:
        """
        Sign a token whose subject is the given account.

        Args:
            account_id: Account identifier placed in the ``sub`` claim
            purpose: Flow the token is minted for

        Returns:
            Encoded JWT string
        """
        issued_at = int(self._clock().timestamp())
        payload: dict[str, Any] = {
            "iss": self._settings.issuer,
            "aud": self._settings.audience,
            "sub": account_id,
            "authenticated": False,
            "purpose": purpose,
            "iat": issued_at,
            "exp": issued_at + int(self._settings.validity.total_seconds()),
        }
        return jwt.encode(payload, self._settings.secret, algorithm=ALGORITHM)


class TokenValidator:
    """Verifies tokens produced by TokenIssuer. Never raises."""

    def __init__(self, settings: TokenSettings, clock: Clock = utc_now) -> None:
        settings.check()
        self._settings = settings
        self._clock = clock

    def validate(self, token: str, purpose: str = PURPOSE_ACTIVATION) -> TokenCheck:
        """
        Verify signature, issuer, audience, expiry and purpose.

        Tokens without a ``purpose`` claim predate password reset and are
        accepted as activation tokens only.

        Args:
            token: Encoded JWT
            purpose: Flow the caller expects the token to belong to

        Returns:
            TokenCheck with the subject on success, or the rejection reason
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret,
                algorithms=[ALGORITHM],
                audience=self._settings.audience,
                issuer=self._settings.issuer,
                options={
                    "require": ["exp", "sub"],
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidSignatureError:
            return self._reject(TokenRejection.BAD_SIGNATURE)
        except jwt.InvalidIssuerError:
            return self._reject(TokenRejection.WRONG_ISSUER)
        except jwt.InvalidAudienceError:
            return self._reject(TokenRejection.WRONG_AUDIENCE)
        except jwt.MissingRequiredClaimError:
            return self._reject(TokenRejection.MISSING_CLAIM)
        except (jwt.InvalidTokenError, TypeError, ValueError):
            return self._reject(TokenRejection.MALFORMED)

        expires_at = payload["exp"]
        subject = payload["sub"]
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            return self._reject(TokenRejection.MALFORMED)
        if not isinstance(subject, str) or not subject:
            return self._reject(TokenRejection.MALFORMED)
        if self._clock().timestamp() >= expires_at:
            return self._reject(TokenRejection.EXPIRED)
        if payload.get("purpose", PURPOSE_ACTIVATION) != purpose:
            return self._reject(TokenRejection.WRONG_PURPOSE)

        return TokenCheck(account_id=subject)

    def _reject(self, reason: TokenRejection) -> TokenCheck:
        logger.info("Rejected identity token: %s", reason.value)
        return TokenCheck(rejection=reason)
