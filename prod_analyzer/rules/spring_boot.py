"""Spring Boot production-safety rules."""

from __future__ import annotations

from typing import List

from ..entry import ConfigEntry
from ..profiles import Platform
from ..result import Violation
from ..severity import Severity
from .base import Rule, make_violation, normalized, split_list

SPRING = (Platform.SPRING_BOOT,)


class ActuatorEndpointsExposedRule:
    id = "ACTUATOR_ENDPOINTS_EXPOSED"
    name = "Actuator endpoints exposed"
    description = "Detects every Actuator endpoint being exposed over HTTP."
    default_severity = Severity.HIGH
    target_keys = ("management.endpoints.web.exposure.include",)
    platforms = SPRING

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if entry.key not in self.target_keys:
            return []
        if "*" not in split_list(entry.value):
            return []
        return [
            make_violation(
                self,
                entry,
                "All Actuator endpoints are exposed over HTTP, including env, heapdump and shutdown.",
                "List only the endpoints you need, e.g. management.endpoints.web.exposure.include=health,info",
            )
        ]


class DebugLoggingEnabledRule:
    id = "DEBUG_LOGGING_ENABLED"
    name = "Debug logging enabled"
    description = "Detects root logging at DEBUG or finer."
    default_severity = Severity.HIGH
    target_keys = ("logging.level.root",)
    platforms = SPRING

    VERBOSE_LEVELS = {"debug", "trace", "all"}

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if entry.key not in self.target_keys or normalized(entry.value) not in self.VERBOSE_LEVELS:
            return []
        return [
            make_violation(
                self,
                entry,
                f'Root logging level is "{entry.value}". Verbose logs can leak secrets and request data.',
                "Set logging.level.root to INFO or WARN in production.",
            )
        ]


class HealthDetailsExposedRule:
    id = "HEALTH_DETAILS_EXPOSED"
    name = "Health details exposed"
    description = "Detects the health endpoint showing component details to everyone."
    default_severity = Severity.MEDIUM
    target_keys = ("management.endpoint.health.show-details",)
    platforms = SPRING

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if entry.key not in self.target_keys or normalized(entry.value) != "always":
            return []
        return [
            make_violation(
                self,
                entry,
                "Health endpoint shows details to unauthenticated callers, revealing infrastructure components.",
                "Set management.endpoint.health.show-details to never or when-authorized.",
            )
        ]


class HibernateDdlAutoUnsafeRule:
    """Schema auto-generation; ``create``/``create-drop`` escalate to CRITICAL."""

    id = "HIBERNATE_DDL_AUTO_UNSAFE"
    name = "Unsafe Hibernate DDL auto"
    description = "Detects Hibernate rewriting the schema at startup."
    default_severity = Severity.HIGH
    target_keys = ("spring.jpa.hibernate.ddl-auto",)
    platforms = SPRING

    DESTRUCTIVE = {"create", "create-drop"}
    UNSAFE = DESTRUCTIVE | {"update"}

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        value = normalized(entry.value)
        if entry.key not in self.target_keys or value not in self.UNSAFE:
            return []
        if value in self.DESTRUCTIVE:
            severity = Severity.CRITICAL
            impact = "This WILL cause data loss on application restart."
        else:
            severity = self.default_severity
            impact = "This may leave the database in an inconsistent state."
        return [
            make_violation(
                self,
                entry,
                f'Hibernate ddl-auto is "{entry.value}". {impact}',
                "Set spring.jpa.hibernate.ddl-auto to validate or none and manage schema changes with Flyway or Liquibase.",
                severity=severity,
            )
        ]


class SpringProfileDevActiveRule:
    id = "SPRING_PROFILE_DEV_ACTIVE"
    name = "Development profile active"
    description = "Detects a non-production Spring profile being active."
    default_severity = Severity.HIGH
    target_keys = ("spring.profiles.active",)
    platforms = SPRING

    NON_PRODUCTION = ("dev", "development", "test", "testing", "local")

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if entry.key not in self.target_keys:
            return []
        active = split_list(entry.value)
        offending = next((profile for profile in active if profile in self.NON_PRODUCTION), None)
        if offending is None:
            return []
        return [
            make_violation(
                self,
                entry,
                f'Non-production profile "{offending}" is active. '
                "Development profiles often relax security and point at test resources.",
                "Activate the production profile, e.g. spring.profiles.active=prod",
            )
        ]


class _FalseFlagRule:
    """Fires when one of ``target_keys`` is set to ``false``."""

    message = ""
    suggestion = ""

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if entry.key not in self.target_keys or normalized(entry.value) != "false":
            return []
        return [make_violation(self, entry, self.message, self.suggestion)]


class SpringCsrfDisabledRule(_FalseFlagRule):
    id = "SPRING_CSRF_DISABLED"
    name = "CSRF protection disabled"
    description = "Detects Spring Security CSRF protection being switched off."
    default_severity = Severity.HIGH
    target_keys = ("spring.security.csrf.enabled",)
    platforms = SPRING
    message = "CSRF protection is disabled; state-changing requests can be forged from other sites."
    suggestion = "Remove spring.security.csrf.enabled=false and keep CSRF protection on for browser clients."


class SpringHttpOnlyCookieDisabledRule(_FalseFlagRule):
    id = "SPRING_HTTP_ONLY_COOKIE_DISABLED"
    name = "Session cookie readable from JavaScript"
    description = "Detects the session cookie HttpOnly flag being disabled."
    default_severity = Severity.HIGH
    target_keys = (
        "server.servlet.session.cookie.http-only",
        "server.session.cookie.http-only",
    )
    platforms = SPRING
    message = "Session cookie is not HttpOnly; an XSS payload can steal the session."
    suggestion = "Set server.servlet.session.cookie.http-only=true"


class SpringSecureCookieDisabledRule(_FalseFlagRule):
    id = "SPRING_SECURE_COOKIE_DISABLED"
    name = "Session cookie sent over HTTP"
    description = "Detects the session cookie Secure flag being disabled."
    default_severity = Severity.HIGH
    target_keys = (
        "server.servlet.session.cookie.secure",
        "server.session.cookie.secure",
    )
    platforms = SPRING
    message = "Session cookie is not marked Secure and can be sent over plain HTTP."
    suggestion = "Set server.servlet.session.cookie.secure=true"


class SpringStackTraceExposedRule:
    id = "SPRING_STACK_TRACE_EXPOSED"
    name = "Error details exposed"
    description = "Detects stack traces, exception names or messages in error responses."
    default_severity = Severity.MEDIUM
    target_keys = (
        "server.error.include-stacktrace",
        "server.error.include-exception",
        "server.error.include-message",
    )
    platforms = SPRING

    EXPOSING_VALUES = {"always", "on-param", "true"}

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if entry.key not in self.target_keys or normalized(entry.value) not in self.EXPOSING_VALUES:
            return []
        return [
            make_violation(
                self,
                entry,
                f'{entry.key} is "{entry.value}"; error responses reveal internal implementation details.',
                f"Set {entry.key} to never (or false for include-exception).",
            )
        ]


def get_rules() -> List[Rule]:
    return [
        ActuatorEndpointsExposedRule(),
        DebugLoggingEnabledRule(),
        HealthDetailsExposedRule(),
        HibernateDdlAutoUnsafeRule(),
        SpringProfileDevActiveRule(),
        SpringCsrfDisabledRule(),
        SpringHttpOnlyCookieDisabledRule(),
        SpringSecureCookieDisabledRule(),
        SpringStackTraceExposedRule(),
    ]
