"""
Enom Client

HTTP transport for the Enom reseller interface.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import requests

from enom_client.exceptions import EnomConnectionError, InvalidCredentials
from enom_client.xml_parser import XMLParser

logger = logging.getLogger("enom.client")

PRODUCTION_URL = "https://reseller.enom.com/interface.asp"
TEST_URL = "https://resellertest.enom.com/interface.asp"

# Registrar error message for a rejected login
_CREDENTIAL_ERROR = "bad user name or password"


@dataclass
class ClientConfig:
    """Credentials, endpoint and proxy settings."""
    username: Optional[str] = None
    password: Optional[str] = None
    test: bool = False
    proxy_addr: Optional[str] = None
    proxy_port: Optional[int] = None
    proxy_user: Optional[str] = None
    proxy_pass: Optional[str] = None
    timeout: Optional[float] = None

    @property
    def base_url(self) -> str:
        return TEST_URL if self.test else PRODUCTION_URL

    @property
    def proxy_url(self) -> Optional[str]:
        """
        Build proxy URL.

        Format: http://[user[:pass]@]host[:port]
        """
        if not self.proxy_addr:
            return None

        auth = ""
        if self.proxy_user:
            auth = quote(self.proxy_user, safe="")
            if self.proxy_pass:
                auth += ":" + quote(self.proxy_pass, safe="")
            auth += "@"

        host = self.proxy_addr
        if "://" in host:
            host = host.split("://", 1)[1]
        port = f":{self.proxy_port}" if self.proxy_port else ""
        return f"http://{auth}{host}{port}"

    @property
    def proxies(self) -> Optional[Dict[str, str]]:
        url = self.proxy_url
        if url is None:
            return None
        return {"http": url, "https": url}


class EnomClient:
    """
    Low-level Enom API client.

    Each request is a single blocking GET with the command parameters
    in the query string. Responses are decoded into nested dicts.

    Example:
        config = ClientConfig(username="reseller", password="secret", test=True)

        with EnomClient(config) as client:
            response = client.request({"Command": "Check", "SLD": "example", "TLD": "com"})
            print(response["interface_response"]["RRPCode"])
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        """
        Initialize Enom client.

        Args:
            config: Credentials and endpoint settings
            session: Optional pre-configured session (one is created if omitted)
        """
        self._config = config
        self._session = session or requests.Session()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _default_params(self) -> Dict[str, str]:
        if not self._config.username or not self._config.password:
            raise InvalidCredentials()
        return {
            "UID": self._config.username,
            "PW": self._config.password,
            "ResponseType": "XML",
        }

    @staticmethod
    def _encode_params(params: Mapping[str, Any]) -> Dict[str, str]:
        """Drop None values and stringify the rest."""
        return {key: str(value) for key, value in params.items() if value is not None}

    def request(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Execute a command.

        Args:
            params: Command parameters, including "Command"

        Returns:
            Decoded response with an "interface_response" key

        Raises:
            InvalidCredentials: If credentials are missing or rejected
            EnomConnectionError: If the HTTP request fails
            InterfaceError: If the response is not a valid interface response
        """
        query = self._default_params()
        query.update(self._encode_params(params))

        command = query.get("Command", "")
        logger.debug(f"Request {command}: {_redact(query)}")

        try:
            http_response = self._session.get(
                self._config.base_url,
                params=query,
                proxies=self._config.proxies,
                timeout=self._config.timeout,
            )
            http_response.raise_for_status()
        except requests.RequestException as e:
            raise EnomConnectionError(f"{command} request failed: {e}")

        response = XMLParser.parse_response(http_response.content)
        status = XMLParser.parse_status(response)

        if status.err_count:
            logger.debug(f"{command} returned {status.err_count} error(s): {status.errors}")
            if _is_credential_error(status.errors):
                raise InvalidCredentials(", ".join(status.errors))

        return response

    def close(self) -> None:
        self._session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False


def _redact(query: Mapping[str, str]) -> Dict[str, str]:
    return {key: ("***" if key == "PW" else value) for key, value in query.items()}


def _is_credential_error(errors) -> bool:
    for error in errors:
        text = error.lower()
        if text.strip().rstrip(".") == _CREDENTIAL_ERROR:
            return True
    return False
