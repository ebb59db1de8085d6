# hub_client/config.py

"""
Proxy configuration for the Hub client.

A ``ProxyInfo`` is assembled from CLI flags or environment variables, validated
once, and then handed to the API client which installs it on its session.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import quote, urlparse

from .exceptions import ConfigurationError

logger = logging.getLogger("hub-client")

MSG_PROXY_INVALID_CONFIG = "The proxy information is not valid - please check the log for the specific issues."
ERROR_MSG_IGNORE_HOSTS_INVALID = "Proxy ignore hosts does not compile to a valid regular expression."
ERROR_MSG_CREDENTIALS_INVALID = "Proxy username and password must both be populated or both be empty."
ERROR_MSG_PROXY_PORT_INVALID = "Proxy port must be greater than 0."
ERROR_MSG_PROXY_HOST_REQUIRED = "Proxy port specified, but proxy host not specified."
WARN_MSG_PROXY_HOST_NOT_SPECIFIED = "The proxy host not specified."


@dataclass
class ProxyValidationResult:
    """Errors and warnings collected while validating a ProxyInfo, keyed by setting."""
    errors: Dict[str, str] = field(default_factory=dict)
    warnings: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class ProxyInfo:
    host: Optional[str] = None
    port: int = 0
    username: Optional[str] = None
    password: Optional[str] = None
    ignored_proxy_hosts: Optional[str] = None

    @staticmethod
    def parse_port(value: Optional[str], default: int = 0) -> int:
        """Convert a port given as text (e.g. from an env var), falling back to *default*."""
        if value is None or not str(value).strip():
            return default
        try:
            return int(str(value).strip())
        except ValueError:
            return default

    @property
    def ignored_host_patterns(self) -> List[str]:
        if not self.ignored_proxy_hosts or not self.ignored_proxy_hosts.strip():
            return []
        return [h.strip() for h in self.ignored_proxy_hosts.split(",") if h.strip()]

    def validate(self) -> ProxyValidationResult:
        result = ProxyValidationResult()
        has_host = bool(self.host and self.host.strip())

        if not has_host:
            result.warnings["proxy_host"] = WARN_MSG_PROXY_HOST_NOT_SPECIFIED

        if has_host and self.port < 0:
            result.errors["proxy_port"] = ERROR_MSG_PROXY_PORT_INVALID
        elif not has_host and self.port > 0:
            result.errors["proxy_port"] = ERROR_MSG_PROXY_HOST_REQUIRED

        has_user = bool(self.username and self.username.strip())
        has_password = bool(self.password and self.password.strip())
        if has_user != has_password:
            result.errors["proxy_credentials"] = ERROR_MSG_CREDENTIALS_INVALID

        for pattern in self.ignored_host_patterns:
            try:
                re.compile(pattern)
            except re.error:
                result.errors["proxy_ignore_hosts"] = ERROR_MSG_IGNORE_HOSTS_INVALID
                break

        return result

    def build(self) -> "ProxyInfo":
        """
        Validate the settings and return self.

        Raises:
            ConfigurationError: If any setting is invalid. Every problem is listed in ``details``.
        """
        result = self.validate()
        for key, warning in result.warnings.items():
            logger.debug("Proxy setting %s: %s", key, warning)
        if not result.is_valid:
            for key, error in result.errors.items():
                logger.error("Proxy setting %s: %s", key, error)
            raise ConfigurationError(MSG_PROXY_INVALID_CONFIG, code="invalid_proxy", details=dict(result.errors))
        return self

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.host.strip())

    def should_use_proxy(self, url: str) -> bool:
        """False when no proxy is configured or the URL's host matches an ignored pattern."""
        if not self.is_configured:
            return False
        hostname = urlparse(url).hostname or ""
        for pattern in self.ignored_host_patterns:
            if re.fullmatch(pattern, hostname):
                return False
        return True

    def to_requests_proxies(self) -> Dict[str, str]:
        """Return the ``proxies`` mapping understood by requests."""
        if not self.is_configured:
            return {}
        credentials = ""
        if self.username and self.password:
            credentials = f"{quote(self.username, safe='')}:{quote(self.password, safe='')}@"
        port = f":{self.port}" if self.port > 0 else ""
        proxy_url = f"http://{credentials}{self.host.strip()}{port}"
        return {"http": proxy_url, "https": proxy_url}

    def __repr__(self) -> str:
        masked = "****" if self.password else None
        return (f"ProxyInfo(host={self.host!r}, port={self.port!r}, username={self.username!r}, "
                f"password={masked!r}, ignored_proxy_hosts={self.ignored_proxy_hosts!r})")
