"""Node.js rules (keys as produced by the ``.env`` normalizer)."""

from __future__ import annotations

import re
from typing import List

from ..entry import ConfigEntry
from ..profiles import Platform
from ..result import Violation
from ..severity import Severity
from .base import REDACTED, Rule, any_match, make_violation, normalized

NODE = (Platform.NODEJS,)
NODE_AND_DOTNET = (Platform.NODEJS, Platform.DOTNET)


def _key(entry: ConfigEntry) -> str:
    return entry.key.lower()


class NodeEnvNotProductionRule:
    id = "NODE_ENV_NOT_PRODUCTION"
    name = "NODE_ENV not production"
    description = "Detects NODE_ENV set to anything other than production."
    default_severity = Severity.HIGH
    target_keys = ("node.env",)
    platforms = NODE

    PRODUCTION_VALUES = {"production", "prod"}

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if entry.key not in self.target_keys or normalized(entry.value) in self.PRODUCTION_VALUES:
            return []
        return [
            make_violation(
                self,
                entry,
                f'NODE_ENV is set to "{entry.value}" instead of "production". '
                "Frameworks enable debug features and detailed errors outside production.",
                "Set NODE_ENV=production in the production environment.",
            )
        ]


class NodeDebugEnabledRule:
    id = "NODEJS_DEBUG_ENABLED"
    name = "Debug output enabled"
    description = "Detects debug namespaces or verbose log levels."
    default_severity = Severity.MEDIUM
    target_keys = ("debug", "log.level", "logging.level")
    platforms = NODE

    DEBUG_VALUES = {"debug", "trace", "verbose", "*", "true", "1"}

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if _key(entry) not in self.target_keys or normalized(entry.value) not in self.DEBUG_VALUES:
            return []
        return [
            make_violation(
                self,
                entry,
                f'Debug output is enabled ({entry.key}={entry.value}); logs may contain secrets and request payloads.',
                f"Set {entry.key} to info or warn, and unset DEBUG in production.",
            )
        ]


class ExposedSecretsRule:
    id = "EXPOSED_SECRETS"
    name = "Weak or placeholder secret"
    description = "Detects secrets holding placeholder, guessable or very short values."
    default_severity = Severity.CRITICAL
    target_keys = (
        "api.key",
        "secret",
        "password",
        "token",
        "private.key",
        "aws.access.key",
        "aws.secret",
        "database.url",
        "db.password",
        "stripe.secret",
        "jwt.secret",
        "session.secret",
    )
    platforms = NODE_AND_DOTNET

    WEAK_VALUES = (
        re.compile(r"^(test|example|placeholder|changeme|default|admin|password|secret|demo)", re.I),
        re.compile(r"^(123|abc|xxx|yyy|zzz)", re.I),
        re.compile(r"^.{1,8}$"),
    )

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if _key(entry) not in self.target_keys or not any_match(self.WEAK_VALUES, entry.value.strip()):
            return []
        return [
            make_violation(
                self,
                entry,
                f'Secret "{entry.key}" has a weak or placeholder value.',
                "Generate a random secret of at least 32 characters and load it from a secret manager. "
                "Never commit .env files.",
                value=REDACTED,
            )
        ]


class CorsWildcardOriginRule:
    id = "CORS_WILDCARD_ORIGIN"
    name = "CORS allows any origin"
    description = "Detects CORS configured to accept requests from every origin."
    default_severity = Severity.HIGH
    target_keys = ("cors.origin", "cors.allowed.origins", "allowed.origins", "access.control.allow.origin")
    platforms = NODE_AND_DOTNET

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if _key(entry) not in self.target_keys or entry.value.strip() != "*":
            return []
        return [
            make_violation(
                self,
                entry,
                "CORS accepts requests from any origin; any website can call this API with the user's browser.",
                f"Set {entry.key} to an explicit list of trusted origins.",
            )
        ]


class JwtWeakSecretRule:
    """Length and predictability are reported as separate violations."""

    id = "JWT_WEAK_SECRET"
    name = "Weak JWT signing secret"
    description = "Detects JWT signing secrets that are short or predictable."
    default_severity = Severity.CRITICAL
    target_keys = (
        "jwt.secret",
        "jwt.key",
        "jwt.signing.key",
        "jwt.token.secret",
        "access.token.secret",
        "refresh.token.secret",
    )
    platforms = NODE

    MIN_LENGTH = 32
    WEAK_PATTERNS = (
        re.compile(r"^(secret|password|key|token|jwt|changeme|admin|test|demo|example)", re.I),
        re.compile(r"^[0-9]{1,10}$"),
        re.compile(r"^[a-z]{1,15}$", re.I),
        re.compile(r"^(.)\1+$"),
    )
    SUGGESTION = (
        "Use a random secret of at least 256 bits, e.g. `openssl rand -base64 48`, "
        "stored in a secret manager, or switch to asymmetric keys (RS256/ES256)."
    )

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if _key(entry) not in self.target_keys:
            return []
        value = entry.value.strip()
        violations = []
        if len(value) < self.MIN_LENGTH:
            violations.append(
                make_violation(
                    self,
                    entry,
                    f'JWT secret "{entry.key}" is too short ({len(value)} characters, minimum {self.MIN_LENGTH}).',
                    self.SUGGESTION,
                    value=REDACTED,
                )
            )
        if any_match(self.WEAK_PATTERNS, value):
            violations.append(
                make_violation(
                    self,
                    entry,
                    f'JWT secret "{entry.key}" uses a weak or predictable pattern; tokens can be forged.',
                    self.SUGGESTION,
                    value=REDACTED,
                )
            )
        return violations


class RateLimitDisabledRule:
    id = "RATE_LIMIT_DISABLED"
    name = "Rate limiting disabled"
    description = "Detects request rate limiting being switched off."
    default_severity = Severity.HIGH
    target_keys = ("rate.limit.enabled", "rate.limiting.enabled", "ratelimit.enabled", "throttle.enabled")
    platforms = NODE

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if _key(entry) not in self.target_keys or normalized(entry.value) not in {"false", "0"}:
            return []
        return [
            make_violation(
                self,
                entry,
                "Rate limiting is disabled; the API is open to brute force and request flooding.",
                f"Set {entry.key} to true and configure limits (e.g. express-rate-limit).",
            )
        ]


class HelmetDisabledRule:
    id = "HELMET_DISABLED"
    name = "Security headers disabled"
    description = "Detects Helmet security headers being switched off."
    default_severity = Severity.MEDIUM
    target_keys = ("helmet.enabled", "security.headers.enabled", "use.helmet")
    platforms = NODE

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if _key(entry) not in self.target_keys or normalized(entry.value) != "false":
            return []
        return [
            make_violation(
                self,
                entry,
                "Helmet is disabled, removing HTTP security headers that mitigate XSS and clickjacking.",
                f'Set {entry.key} to "true" and use app.use(helmet()).',
            )
        ]


def get_rules() -> List[Rule]:
    return [
        NodeEnvNotProductionRule(),
        NodeDebugEnabledRule(),
        ExposedSecretsRule(),
        CorsWildcardOriginRule(),
        JwtWeakSecretRule(),
        RateLimitDisabledRule(),
        HelmetDisabledRule(),
    ]
