""".NET / ASP.NET Core rules.

JSON keys keep their casing, so the keys here are written the way they
appear in ``appsettings.json``.
"""

from __future__ import annotations

import re
from typing import List

from ..entry import ConfigEntry
from ..profiles import Platform
from ..result import Violation
from ..severity import Severity
from .base import REDACTED, WILDCARD, Rule, any_match, make_violation, normalized

DOTNET = (Platform.DOTNET,)


class AspNetCoreEnvironmentRule:
    id = "ASPNETCORE_ENVIRONMENT_DEVELOPMENT"
    name = "ASP.NET Core development environment"
    description = "Detects ASPNETCORE_ENVIRONMENT set to a development value."
    default_severity = Severity.HIGH
    # JSON spelling and the .env-normalized spelling
    target_keys = ("ASPNETCORE_ENVIRONMENT", "aspnetcore.environment")
    platforms = DOTNET

    DEVELOPMENT_VALUES = {"development", "dev", "local", "test"}

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if entry.key not in self.target_keys or normalized(entry.value) not in self.DEVELOPMENT_VALUES:
            return []
        return [
            make_violation(
                self,
                entry,
                f'ASPNETCORE_ENVIRONMENT is "{entry.value}"; the developer exception page and '
                "detailed errors are enabled.",
                "Set ASPNETCORE_ENVIRONMENT=Production.",
            )
        ]


class DetailedErrorsRule:
    id = "DOTNET_DETAILED_ERRORS_ENABLED"
    name = "Detailed errors enabled"
    description = "Detects detailed error pages or debug-level framework logging."
    default_severity = Severity.HIGH
    target_keys = (
        "customErrors",
        "Logging.LogLevel.Default",
        "Logging.LogLevel.Microsoft",
        "DetailedErrors",
    )
    platforms = DOTNET

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if entry.key not in self.target_keys:
            return []
        value = normalized(entry.value)
        if entry.key == "customErrors" and value == "off":
            return [
                make_violation(
                    self,
                    entry,
                    'customErrors is "Off"; detailed error pages are shown to users.',
                    'Set customErrors mode="On" or "RemoteOnly" and log details server-side.',
                )
            ]
        if "LogLevel" in entry.key and value in {"debug", "trace"}:
            return [
                make_violation(
                    self,
                    entry,
                    f'Logging level is "{entry.value}"; sensitive data may end up in logs.',
                    "Use Information, Warning or Error in production.",
                    severity=Severity.MEDIUM,
                )
            ]
        if entry.key == "DetailedErrors" and value in {"true", "1"}:
            return [
                make_violation(
                    self,
                    entry,
                    "DetailedErrors is enabled; error responses expose internals.",
                    "Set DetailedErrors to false in production.",
                )
            ]
        return []


class ConnectionStringExposedRule:
    """Checks every entry because connection strings hide under arbitrary keys."""

    id = "DOTNET_CONNECTION_STRING_EXPOSED"
    name = "Plain-text connection string"
    description = "Detects connection strings with credentials committed to configuration."
    default_severity = Severity.CRITICAL
    target_keys = (WILDCARD,)
    platforms = DOTNET

    MARKERS = ("ConnectionStrings", "connectionString", "Data Source", "Server=", "Database=")
    CREDENTIAL_PATTERNS = (
        re.compile(r"password=.*;", re.I),
        re.compile(r"pwd=.*;", re.I),
        re.compile(r"password=(admin|root|sa|password|123)", re.I),
        re.compile(r"Integrated Security=false", re.I),
    )

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        key_marked = any(marker in entry.key for marker in self.MARKERS)
        value_marked = any(marker in entry.value for marker in self.MARKERS)
        if not key_marked and not value_marked:
            return []
        if not key_marked and not any_match(self.CREDENTIAL_PATTERNS, entry.value):
            return []
        return [
            make_violation(
                self,
                entry,
                "Connection string stored in plain-text configuration.",
                "Move connection strings to Azure Key Vault, AWS Secrets Manager or user secrets, "
                "and prefer Managed Identity over embedded passwords.",
                value=REDACTED,
            )
        ]


class _EnabledFlagRule:
    flagged_values = frozenset()
    message = ""
    suggestion = ""

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        if entry.key not in self.target_keys or normalized(entry.value) not in self.flagged_values:
            return []
        return [make_violation(self, entry, self.message, self.suggestion)]


class DeveloperExceptionPageRule(_EnabledFlagRule):
    id = "DOTNET_DEVELOPER_EXCEPTION_PAGE"
    name = "Developer exception page enabled"
    description = "Detects the developer exception page being enabled."
    default_severity = Severity.HIGH
    target_keys = ("UseDeveloperExceptionPage", "DeveloperExceptionPage")
    platforms = DOTNET
    flagged_values = frozenset({"true", "1"})
    message = "Developer exception page is enabled; stack traces and source snippets are shown to users."
    suggestion = "Only call UseDeveloperExceptionPage() in Development and use UseExceptionHandler() elsewhere."


class HttpsRedirectionDisabledRule(_EnabledFlagRule):
    id = "DOTNET_HTTPS_REDIRECTION_DISABLED"
    name = "HTTPS redirection disabled"
    description = "Detects HTTPS redirection or enforcement being switched off."
    default_severity = Severity.HIGH
    target_keys = ("UseHttpsRedirection", "RequireHttps", "HttpsRedirection")
    platforms = DOTNET
    flagged_values = frozenset({"false", "0"})
    message = "HTTPS redirection is disabled; traffic may be served over plain HTTP."
    suggestion = "Enable UseHttpsRedirection() and HSTS in production."


def get_rules() -> List[Rule]:
    return [
        AspNetCoreEnvironmentRule(),
        DetailedErrorsRule(),
        ConnectionStringExposedRule(),
        DeveloperExceptionPageRule(),
        HttpsRedirectionDisabledRule(),
    ]
