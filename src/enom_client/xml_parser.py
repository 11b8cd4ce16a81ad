"""
Enom XML Parser

Decodes Enom XML responses into nested dictionaries and normalizes the
per-command response shapes into structured values.
"""

import logging
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from lxml import etree

from enom_client.exceptions import DateParseError, InterfaceError
from enom_client.models import CommandStatus, DomainRecord, RenewalResult

logger = logging.getLogger("enom.parser")

CONTENT_KEY = "__content__"

# Check response code for an available domain
RRP_AVAILABLE = "210"

# Date formats used by the registrar
DOMAIN_INFO_DATE_FORMAT = "%m/%d/%Y"   # GetDomainInfo, GetAllDomains
REGISTRY_DATE_FORMAT = "%Y-%m-%d"      # Extend

# Secure parser
_parser = etree.XMLParser(
    resolve_entities=False,
    no_network=True,
    remove_blank_text=True,
)

_TRAILING_DIGITS = re.compile(r"(\d*)$")

# Declared encoding attribute inside a leading <?xml ...?> declaration
_UTF16_DECLARATION = re.compile(
    rb"""^(\s*<\?xml[^>]*?)\s+encoding\s*=\s*["']utf-16["']""",
    re.IGNORECASE,
)
_UTF16_BOMS = (b"\xff\xfe", b"\xfe\xff")


def _normalize_declaration(xml_data: bytes) -> bytes:
    """
    Drop a utf-16 encoding label from a body that is not UTF-16.

    The interface labels responses utf-16 while sending single-byte text.
    A real UTF-16 body starts with a byte order mark and is left alone.
    """
    if xml_data.startswith(_UTF16_BOMS):
        return xml_data
    return _UTF16_DECLARATION.sub(rb"\1", xml_data, count=1)


def _parse_xml(xml_data: bytes) -> etree._Element:
    """Parse XML with secure parser."""
    xml_data = _normalize_declaration(xml_data)
    try:
        return etree.fromstring(xml_data, _parser)
    except etree.XMLSyntaxError as e:
        raise InterfaceError(f"XML parse error: {e}")


def _undasherize(name: str) -> str:
    return name.replace("-", "_")


def _tag_name(elem: etree._Element) -> str:
    return _undasherize(etree.QName(elem).localname)


def _element_to_value(elem: etree._Element) -> Any:
    """
    Convert an element into a string, dict or None.

    Attributes become keys, text alongside attributes is stored under
    __content__, and repeated child tags collapse into lists.
    """
    children = [child for child in elem if isinstance(child.tag, str)]
    attrs = {_undasherize(k): v for k, v in elem.attrib.items()}
    text = (elem.text or "").strip()

    if not children and not attrs:
        return text or None

    result: Dict[str, Any] = dict(attrs)
    repeated = set()
    for child in children:
        key = _tag_name(child)
        value = _element_to_value(child)
        if key not in result:
            result[key] = value
        elif key in repeated:
            result[key].append(value)
        else:
            result[key] = [result[key], value]
            repeated.add(key)

    if text and not children:
        result[CONTENT_KEY] = text
    return result


def _as_list(value: Any) -> List[Any]:
    """Normalize a value that may be a single item or a list into a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _dig(data: Any, *path: str) -> Any:
    """Walk nested mappings, raising InterfaceError on a missing key."""
    current = data
    for i, key in enumerate(path):
        if not isinstance(current, Mapping) or key not in current:
            raise InterfaceError(f"Missing '{'.'.join(path[:i + 1])}' in response")
        current = current[key]
    return current


def parse_date(text: Optional[str], fmt: str) -> date:
    """
    Parse the date portion of a registrar timestamp.

    Only the first whitespace-separated token is used, so
    "11/9/2030 12:00:00 AM" parses as 2030-11-09.

    Raises:
        DateParseError: If the text is absent or malformed
    """
    if not text or not isinstance(text, str) or not text.split():
        raise DateParseError(f"Missing date value: {text!r}")
    token = text.split()[0]
    try:
        return datetime.strptime(token, fmt).date()
    except ValueError:
        raise DateParseError(f"Malformed date {token!r}, expected {fmt}")


class XMLParser:
    """
    Parses Enom responses.

    parse_response decodes raw XML. The remaining static methods each
    adapt one command's response shape and raise InterfaceError when the
    expected structure is missing.
    """

    @staticmethod
    def parse_response(xml_data: bytes) -> Dict[str, Any]:
        """
        Decode an XML response body.

        Args:
            xml_data: Raw XML bytes

        Returns:
            Dict keyed by the (undasherized) root element name
        """
        root = _parse_xml(xml_data)
        return {_tag_name(root): _element_to_value(root)}

    @staticmethod
    def interface_response(response: Any) -> Dict[str, Any]:
        """Return the interface_response payload or raise InterfaceError."""
        if not isinstance(response, Mapping) or not isinstance(response.get("interface_response"), Mapping):
            raise InterfaceError(f"Unexpected response: {response!r}")
        return response["interface_response"]

    @staticmethod
    def parse_status(response: Any) -> CommandStatus:
        """Extract ErrCount, error messages and RRPCode."""
        payload = XMLParser.interface_response(response)

        errors = []
        raw_errors = payload.get("errors")
        if isinstance(raw_errors, Mapping):
            errors = [str(v) for v in raw_errors.values() if v]

        raw_count = payload.get("ErrCount", "0")
        try:
            err_count = int(raw_count)
        except (TypeError, ValueError):
            raise InterfaceError(f"Invalid ErrCount: {raw_count!r}")

        return CommandStatus(
            err_count=err_count,
            errors=errors,
            rrp_code=payload.get("RRPCode"),
        )

    # =========================================================================
    # Domain Attributes
    # =========================================================================

    @staticmethod
    def parse_domain_name(attributes: Mapping) -> str:
        """
        Extract the domain name.

        Handles domainname as an element with attributes (text under
        __content__), domainname as a plain string, and DomainName.
        """
        value = attributes.get("domainname")
        if value is None:
            value = attributes.get("DomainName")
        if isinstance(value, Mapping):
            value = value.get(CONTENT_KEY)
        if not value or not isinstance(value, str):
            raise InterfaceError("Missing domain name in response")
        return value

    @staticmethod
    def parse_expiration_date(attributes: Mapping) -> date:
        """Extract expiration_date or status.expiration (MM/DD/YYYY)."""
        text = attributes.get("expiration_date")
        if text is None:
            status = attributes.get("status")
            if isinstance(status, Mapping):
                text = status.get("expiration")
        return parse_date(text, DOMAIN_INFO_DATE_FORMAT)

    @staticmethod
    def parse_extended_attributes(attributes: Mapping) -> Tuple[List[str], str]:
        """
        Extract (nameservers, registration_status) from GetDomainInfo.

        Nameservers come from the first services entry's DNS configuration.
        """
        entries = _as_list(_dig(attributes, "services", "entry"))
        if not entries:
            raise InterfaceError("Missing 'services.entry' in response")
        dns = _dig(entries[0], "configuration", "dns")
        nameservers = [ns for ns in _as_list(dns) if ns]
        status = _dig(attributes, "status", "registrationstatus")
        return nameservers, status

    @staticmethod
    def parse_domain_attributes(attributes: Mapping) -> DomainRecord:
        """Normalize a raw GetDomainInfo or DomainDetail mapping."""
        if not isinstance(attributes, Mapping):
            raise InterfaceError(f"Unexpected domain attributes: {attributes!r}")

        record = DomainRecord(
            name=XMLParser.parse_domain_name(attributes),
            expiration_date=XMLParser.parse_expiration_date(attributes),
        )
        if attributes.get("services") and attributes.get("status"):
            record.nameservers, record.registration_status = (
                XMLParser.parse_extended_attributes(attributes)
            )
        return record

    # =========================================================================
    # Command Responses
    # =========================================================================

    @staticmethod
    def _command_payload(response: Any, key: str) -> Any:
        payload = XMLParser.interface_response(response)
        if key not in payload:
            status = XMLParser.parse_status(response)
            raise InterfaceError(f"Missing '{key}' in response", status.errors)
        return payload[key]

    @staticmethod
    def parse_domain_info(response: Any) -> Dict[str, Any]:
        """Return the raw GetDomainInfo attribute mapping."""
        return XMLParser._command_payload(response, "GetDomainInfo")

    @staticmethod
    def parse_all_domains(response: Any) -> List[Dict[str, Any]]:
        """Return DomainDetail mappings in response order."""
        payload = XMLParser._command_payload(response, "GetAllDomains")
        if not isinstance(payload, Mapping):
            return []
        return _as_list(payload.get("DomainDetail"))

    @staticmethod
    def parse_check(response: Any) -> bool:
        """Available iff RRPCode is exactly "210"."""
        return XMLParser._command_payload(response, "RRPCode") == RRP_AVAILABLE

    @staticmethod
    def parse_check_multiple(response: Any) -> List[str]:
        """
        Collect available domains from a multi-TLD Check response.

        Every key whose value is "210" is paired with Domain{N}, where N is
        the key's trailing digits (RRPCode3 -> Domain3). This relies on the
        registrar's key naming and ordering; results follow response order.
        """
        payload = XMLParser.interface_response(response)
        result = []
        for key, value in payload.items():
            if value != RRP_AVAILABLE:
                continue
            suffix = _TRAILING_DIGITS.search(key).group(1)
            domain = payload.get(f"Domain{suffix}")
            if domain:
                result.append(domain)
        return result

    @staticmethod
    def parse_renewal(response: Any) -> RenewalResult:
        """Extract the new registry expiration date from Extend (YYYY-MM-DD)."""
        info = XMLParser._command_payload(response, "DomainInfo")
        text = _dig(info, "RegistryExpDate")
        payload = XMLParser.interface_response(response)
        return RenewalResult(
            registry_expiration_date=parse_date(text, REGISTRY_DATE_FORMAT),
            order_id=payload.get("OrderID"),
        )

    @staticmethod
    def parse_reg_lock(response: Any) -> bool:
        return XMLParser._command_payload(response, "reg_lock") == "1"

    @staticmethod
    def parse_auto_renew(response: Any) -> bool:
        flag = XMLParser._command_payload(response, "auto_renew")
        try:
            return int(flag) == 1
        except (TypeError, ValueError):
            raise InterfaceError(f"Invalid auto_renew flag: {flag!r}")

    @staticmethod
    def parse_namespin(response: Any, tlds: Iterable[str]) -> List[str]:
        """
        Flatten namespinner suggestions into available "name.tld" strings.

        Ordered by candidate, then by the given TLD order.
        """
        spin = XMLParser._command_payload(response, "namespin")
        candidates = _as_list(_dig(spin, "domains", "domain"))
        tlds = list(tlds)

        suggestions = []
        for candidate in candidates:
            name = candidate.get("name") if isinstance(candidate, Mapping) else None
            if not name:
                logger.debug(f"Skipping suggestion without name: {candidate!r}")
                continue
            for tld in tlds:
                if candidate.get(tld) == "y":
                    suggestions.append(f"{name.lower()}.{tld}")
        return suggestions
