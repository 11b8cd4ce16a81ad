"""Shared pytest fixtures and response builders for enom tests."""

from typing import Any, Dict, List, Mapping, Optional, Sequence

import pytest
from click.testing import CliRunner


DOMAIN_INFO_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<interface-response>
  <GetDomainInfo>
    <domainname sld="example" tld="com" domainnameid="340724808">example.com</domainname>
    <multy-langSLD/>
    <status>
      <expiration>11/9/2030 12:00:00 AM</expiration>
      <escrowliftdate/>
      <registrar>eNom, Inc.</registrar>
      <registrationstatus>Registered</registrationstatus>
      <purchase-status>Paid</purchase-status>
    </status>
    <services>
      <entry name="dnsserver">
        <enomurl>https://www.enom.com/domains/dns.asp</enomurl>
        <configuration changable="0" type="dns">
          <dns>ns1.example.net</dns>
          <dns>ns2.example.net</dns>
        </configuration>
      </entry>
      <entry name="wsb">
        <configuration type="wsb">
          <price>0</price>
        </configuration>
      </entry>
    </services>
  </GetDomainInfo>
  <Command>GETDOMAININFO</Command>
  <ErrCount>0</ErrCount>
  <Done>true</Done>
</interface-response>
"""

ALL_DOMAINS_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<interface-response>
  <GetAllDomains>
    <DomainDetail>
      <DomainName>example.com</DomainName>
      <DomainNameID>340724808</DomainNameID>
      <expiration-date>11/9/2030 12:00:00 AM</expiration-date>
      <lockstatus>Locked</lockstatus>
      <AutoRenew>Yes</AutoRenew>
    </DomainDetail>
    <DomainDetail>
      <DomainName>example.org</DomainName>
      <DomainNameID>340724809</DomainNameID>
      <expiration-date>3/1/2027 1:15:00 PM</expiration-date>
      <lockstatus>Not Locked</lockstatus>
      <AutoRenew>No</AutoRenew>
    </DomainDetail>
    <domaincount>2</domaincount>
  </GetAllDomains>
  <Command>GETALLDOMAINS</Command>
  <ErrCount>0</ErrCount>
  <Done>true</Done>
</interface-response>
"""

BAD_LOGIN_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<interface-response>
  <ErrCount>1</ErrCount>
  <errors>
    <Err1>Bad User name or Password</Err1>
  </errors>
  <Command>CHECK</Command>
  <Done>true</Done>
</interface-response>
"""


def interface(err_count: int = 0, errors: Sequence[str] = (), **fields: Any) -> Dict[str, Any]:
    """Build a decoded response with the given interface_response fields."""
    payload: Dict[str, Any] = {"ErrCount": str(err_count)}
    if errors:
        payload["errors"] = {f"Err{i}": error for i, error in enumerate(errors, start=1)}
    payload.update(fields)
    return {"interface_response": payload}


def domain_info(
    name: str = "example.com",
    expiration: str = "11/9/2030 12:00:00 AM",
    status: str = "Registered",
    nameservers: Sequence[str] = ("ns1.example.net", "ns2.example.net"),
) -> Dict[str, Any]:
    """Build a decoded GetDomainInfo response."""
    sld, tld = name.split(".", 1)
    return interface(GetDomainInfo={
        "domainname": {"sld": sld, "tld": tld, "__content__": name},
        "status": {
            "expiration": expiration,
            "registrar": "eNom, Inc.",
            "registrationstatus": status,
        },
        "services": {
            "entry": [
                {
                    "name": "dnsserver",
                    "configuration": {"type": "dns", "dns": list(nameservers)},
                },
                {"name": "wsb", "configuration": {"type": "wsb", "price": "0"}},
            ],
        },
    })


class ScriptedClient:
    """
    Stand-in for EnomClient that replays canned responses by command.

    A list of responses is consumed in order; a single response is reused.
    """

    def __init__(self, responses: Optional[Mapping[str, Any]] = None):
        self.responses = dict(responses or {})
        self.requests: List[Dict[str, Any]] = []
        self.config = None
        self.closed = False

    def request(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        self.requests.append(dict(params))
        command = params["Command"]
        if command not in self.responses:
            raise AssertionError(f"Unexpected command: {command}")
        response = self.responses[command]
        if isinstance(response, list):
            return response.pop(0)
        return response

    def close(self) -> None:
        self.closed = True

    @property
    def commands(self) -> List[str]:
        return [r["Command"] for r in self.requests]

    def last(self, command: str) -> Dict[str, Any]:
        for params in reversed(self.requests):
            if params["Command"] == command:
                return params
        raise AssertionError(f"{command} was not requested")


@pytest.fixture
def client() -> ScriptedClient:
    return ScriptedClient()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()
