"""
Enom Domain

Domain entity and registrar operations.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from dateutil.relativedelta import relativedelta

from enom_client.client import EnomClient
from enom_client.exceptions import InterfaceError, InvalidNameServerCount
from enom_client.models import LazyValue
from enom_client.suffix import parse_sld_and_tld
from enom_client.xml_parser import XMLParser

logger = logging.getLogger("enom.domain")

# Registrar-defined TLD bundles for multi-TLD checks
#   *   com, net, org, info, biz, us, ws, cc, tv, bz, nu
#   *1  com, net, org, info, biz, us, ws
#   *2  com, net, org, info, biz, us
#   @   com, net, org
TLD_GROUPS = ("*", "*1", "*2", "@")

DEFAULT_SUGGESTION_TLDS = ("com", "net", "tv", "cc")

MIN_NAMESERVERS = 2
MAX_NAMESERVERS = 12

MIN_RENEWAL_YEARS = 1
MAX_RENEWAL_YEARS = 10


def _split_name(name: str, tld: Optional[str] = None):
    """Use name as the sld when tld is given, otherwise parse it."""
    if tld:
        return name, tld
    return parse_sld_and_tld(name)


def _nameserver_params(nameservers: Sequence[str]) -> Dict[str, str]:
    return {f"NS{i}": ns for i, ns in enumerate(nameservers, start=1)}


def valid_renewal_length(years: Any) -> bool:
    """Renewal periods are whole years between 1 and 10."""
    return (
        isinstance(years, int)
        and not isinstance(years, bool)
        and MIN_RENEWAL_YEARS <= years <= MAX_RENEWAL_YEARS
    )


class Domain:
    """
    A domain in (or registrable through) an Enom account.

    Instances are request-scoped snapshots. Attributes that need a second
    API call (nameservers, registration status, lock and auto-renew
    state) are fetched on first access and kept for the lifetime of the
    instance. Mutating operations update the local copy instead of
    re-fetching, since the registrar does not reflect changes immediately.

    Example:
        with EnomClient(ClientConfig(username="user", password="pass")) as client:
            if Domain.is_available(client, "example.com"):
                domain = Domain.register(client, "example.com", years=2)
                domain.lock()
                print(domain.expiration_date, domain.nameservers)
    """

    def __init__(self, client: EnomClient, attributes: Mapping[str, Any]):
        """
        Build a domain from a raw attribute mapping.

        Args:
            client: Client used for lazy lookups and instance operations
            attributes: GetDomainInfo payload or a GetAllDomains DomainDetail

        Raises:
            InterfaceError: If the name or expiration date is missing
            DateParseError: If the expiration date is malformed
        """
        self._client = client

        record = XMLParser.parse_domain_attributes(attributes)
        self._name = record.name
        self._sld, self._tld = parse_sld_and_tld(record.name)
        self.expiration_date: date = record.expiration_date

        self._nameservers: LazyValue[List[str]] = LazyValue()
        self._registration_status: LazyValue[str] = LazyValue()
        self._locked: LazyValue[bool] = LazyValue()
        self._auto_renew: LazyValue[bool] = LazyValue()

        # GetDomainInfo carries extended attributes, GetAllDomains does not
        if record.has_extended_attributes:
            self._nameservers.set(record.nameservers)
            self._registration_status.set(record.registration_status)

    def __repr__(self) -> str:
        return f"<Domain {self._name} expires {self.expiration_date.isoformat()}>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def sld(self) -> str:
        return self._sld

    @property
    def tld(self) -> str:
        return self._tld

    # =========================================================================
    # Lookups
    # =========================================================================

    @classmethod
    def find(cls, client: EnomClient, name: str, tld: Optional[str] = None) -> "Domain":
        """
        Find a domain in the account.

        Args:
            client: Enom client
            name: Domain name, or the sld when tld is given
            tld: Optional top-level domain

        Returns:
            Domain with extended attributes populated
        """
        sld, tld = _split_name(name, tld)
        response = client.request({"Command": "GetDomainInfo", "SLD": sld, "TLD": tld})
        return cls(client, XMLParser.parse_domain_info(response))

    @classmethod
    def is_available(cls, client: EnomClient, name: str, tld: Optional[str] = None) -> bool:
        """Check whether the domain can be registered."""
        sld, tld = _split_name(name, tld)
        response = client.request({"Command": "Check", "SLD": sld, "TLD": tld})
        return XMLParser.parse_check(response)

    @classmethod
    def check(cls, client: EnomClient, name: str, tld: Optional[str] = None) -> str:
        """Return "available" or "unavailable"."""
        return "available" if cls.is_available(client, name, tld) else "unavailable"

    @classmethod
    def check_multiple_tlds(
        cls,
        client: EnomClient,
        sld: str,
        tlds: Union[str, Iterable[str]] = "*",
    ) -> List[str]:
        """
        Check an sld against one of the registrar's TLD bundles.

        Args:
            client: Enom client
            sld: Second-level label to check
            tlds: One of "*", "*1", "*2", "@"

        Returns:
            Available domain names, in response order

        Raises:
            NotImplementedError: If an explicit TLD list is given; the
                registrar rejects custom lists
            ValueError: If tlds is not a known bundle
        """
        if not isinstance(tlds, str):
            raise NotImplementedError("Checking a custom TLD list is not supported by the registrar")
        if tlds not in TLD_GROUPS:
            raise ValueError(f"Unknown TLD group {tlds!r}, expected one of {', '.join(TLD_GROUPS)}")

        response = client.request({"Command": "Check", "SLD": sld, "TLD": tlds})
        return XMLParser.parse_check_multiple(response)

    @classmethod
    def all(cls, client: EnomClient) -> List["Domain"]:
        """Return every domain in the account, in response order."""
        response = client.request({"Command": "GetAllDomains"})
        return [cls(client, detail) for detail in XMLParser.parse_all_domains(response)]

    @classmethod
    def suggest(
        cls,
        client: EnomClient,
        name: str,
        tlds: Optional[Iterable[str]] = None,
        max_results: int = 8,
        similar: str = "High",
    ) -> List[str]:
        """
        Suggest available domains using the namespinner.

        Args:
            client: Enom client
            name: Seed domain name
            tlds: TLDs to include (default: com, net, tv, cc)
            max_results: Maximum number of candidate names
            similar: Similarity tier (High, Medium, Low)

        Returns:
            "name.tld" strings ordered by candidate, then TLD
        """
        sld, tld = parse_sld_and_tld(name)
        response = client.request({
            "Command": "namespinner",
            "SLD": sld,
            "TLD": tld,
            "MaxResults": max_results,
            "Similar": similar,
        })
        return XMLParser.parse_namespin(response, tlds or DEFAULT_SUGGESTION_TLDS)

    # =========================================================================
    # Registration
    # =========================================================================

    @classmethod
    def register(
        cls,
        client: EnomClient,
        name: str,
        nameservers: Optional[Sequence[str]] = None,
        years: Optional[int] = None,
        **options: Any,
    ) -> "Domain":
        """
        Purchase a domain.

        Args:
            client: Enom client
            name: Domain name
            nameservers: Nameservers to use (registrar default DNS if omitted)
            years: Registration period
            **options: Additional Purchase parameters, applied last

        Returns:
            The registered domain, re-fetched from the registrar
        """
        sld, tld = parse_sld_and_tld(name)

        params: Dict[str, Any] = {"Command": "Purchase", "SLD": sld, "TLD": tld}
        if nameservers:
            params.update(_nameserver_params(nameservers))
        else:
            params["UseDNS"] = "default"
        if years:
            params["NumYears"] = years
        params.update(options)

        client.request(params)
        logger.info(f"Purchased {name}")
        return cls.find(client, name)

    @classmethod
    def delete(cls, client: EnomClient, name: str, **options: Any) -> bool:
        """
        Delete a registration.

        The registrar only allows this within 5 days of registration and
        for accounts on its DeleteRegistration allow-list.

        Returns:
            True if the registrar reports RRPCode 200
        """
        sld, tld = parse_sld_and_tld(name)
        params = {"Command": "DeleteRegistration", "SLD": sld, "TLD": tld}
        params.update(options)

        status = XMLParser.parse_status(client.request(params))
        try:
            deleted = int(status.rrp_code) == 200
        except (TypeError, ValueError):
            deleted = False

        if deleted:
            logger.info(f"Deleted registration for {name}")
        else:
            logger.warning(f"Delete of {name} failed: {status.errors or status.rrp_code}")
        return deleted

    @classmethod
    def transfer(cls, client: EnomClient, name: str, auth_code: str, renew: bool = False) -> bool:
        """
        Transfer a domain in from another registrar.

        The account is charged when the order succeeds.

        Args:
            client: Enom client
            name: Domain name
            auth_code: Authorization (EPP) code from the losing registrar
            renew: Add a renewal year to the transfer

        Returns:
            True if the order was accepted without errors
        """
        sld, tld = parse_sld_and_tld(name)

        params: Dict[str, Any] = {
            "Command": "TP_CreateOrder",
            "OrderType": "AutoVerification",
            "DomainCount": 1,
            "SLD1": sld,
            "TLD1": tld,
            "AuthInfo1": auth_code,
            # Transfer existing Whois contacts
            "UseContacts": 1,
        }
        if renew:
            params["Renew"] = 1

        status = XMLParser.parse_status(client.request(params))
        if status.success:
            logger.info(f"Transfer order created for {name}")
        return status.success

    @classmethod
    def renew(cls, client: EnomClient, name: str, years: Optional[int] = None) -> "Domain":
        """
        Extend a registration.

        GetDomainInfo does not show the new expiration date right away, so
        the date from the Extend response is patched into the result.
        """
        sld, tld = parse_sld_and_tld(name)
        params: Dict[str, Any] = {"Command": "Extend", "SLD": sld, "TLD": tld}
        if years:
            params["NumYears"] = years

        renewal = XMLParser.parse_renewal(client.request(params))
        domain = cls.find(client, name)
        domain.expiration_date = renewal.registry_expiration_date

        logger.info(f"Renewed {name} until {domain.expiration_date.isoformat()} (order {renewal.order_id})")
        return domain

    @classmethod
    def update_expired(cls, client: EnomClient, name: str, years: int = 1) -> Union["Domain", bool]:
        """
        Renew a domain that has already expired.

        Returns:
            The renewed domain, or False if the registrar reported errors

        Raises:
            ValueError: If years is not an integer between 1 and 10
        """
        if not valid_renewal_length(years):
            raise ValueError("Renewal years must be an integer between 1 and 10!")

        response = client.request({
            "Command": "UpdateExpiredDomains",
            "DomainName": name,
            "NumYears": years,
        })
        status = XMLParser.parse_status(response)
        if not status.success:
            logger.warning(f"UpdateExpiredDomains for {name} failed: {status.errors}")
            return False

        domain = cls.find(client, name)

        # The registrar is slow to reflect the renewal, so correct locally
        if domain.expiration_date < date.today():
            domain.expiration_date = domain.expiration_date + relativedelta(years=years)
        if domain.registration_status == "Expired":
            domain.registration_status = "Registered"

        return domain

    # =========================================================================
    # Lazy Attributes
    # =========================================================================

    def _fetch_extended_attributes(self) -> None:
        """Fetch GetDomainInfo for domains built from GetAllDomains."""
        response = self._client.request({"Command": "GetDomainInfo", "SLD": self.sld, "TLD": self.tld})
        nameservers, status = XMLParser.parse_extended_attributes(XMLParser.parse_domain_info(response))

        # Local overrides win over fetched values
        if not self._nameservers.is_resolved:
            self._nameservers.set(nameservers)
        if not self._registration_status.is_resolved:
            self._registration_status.set(status)

    @property
    def nameservers(self) -> List[str]:
        if not self._nameservers.is_resolved:
            self._fetch_extended_attributes()
        return self._nameservers.get()

    @property
    def registration_status(self) -> str:
        if not self._registration_status.is_resolved:
            self._fetch_extended_attributes()
        return self._registration_status.get()

    @registration_status.setter
    def registration_status(self, status: str) -> None:
        self._registration_status.set(status)

    @property
    def is_active(self) -> bool:
        return self.registration_status == "Registered"

    @property
    def is_expired(self) -> bool:
        return self.registration_status == "Expired"

    @property
    def locked(self) -> bool:
        """Whether the registrar lock prevents transfers."""
        if not self._locked.is_resolved:
            response = self._client.request({"Command": "GetRegLock", "SLD": self.sld, "TLD": self.tld})
            self._locked.set(XMLParser.parse_reg_lock(response))
        return self._locked.get()

    @property
    def unlocked(self) -> bool:
        return not self.locked

    @property
    def auto_renew(self) -> bool:
        """Auto-renew state. Expired domains never auto-renew."""
        if not self._auto_renew.is_resolved:
            # GetRenew fails for expired domains
            if self.is_expired:
                self._auto_renew.set(False)
            else:
                response = self._client.request({"Command": "GetRenew", "SLD": self.sld, "TLD": self.tld})
                self._auto_renew.set(XMLParser.parse_auto_renew(response))
        return self._auto_renew.get()

    @auto_renew.setter
    def auto_renew(self, enabled: bool) -> None:
        flag = "1" if enabled else "0"
        response = self._client.request({
            "Command": "SetRenew",
            "SLD": self.sld,
            "TLD": self.tld,
            "RenewFlag": flag,
        })
        status = XMLParser.parse_status(response)
        if not status.success:
            raise InterfaceError(f"SetRenew failed for {self.name}", status.errors)
        self._auto_renew.set(flag == "1")

    # =========================================================================
    # Instance Operations
    # =========================================================================

    def _set_reg_lock(self, unlock_flag: str) -> "Domain":
        # The registrar's flag is inverted: 0 locks, 1 unlocks
        self._client.request({
            "Command": "SetRegLock",
            "SLD": self.sld,
            "TLD": self.tld,
            "UnlockRegistrar": unlock_flag,
        })
        self._locked.set(unlock_flag == "0")
        return self

    def lock(self) -> "Domain":
        """Lock the domain at the registrar so it can't be transferred."""
        return self._set_reg_lock("0")

    def unlock(self) -> "Domain":
        """Unlock the domain at the registrar to permit transfers."""
        return self._set_reg_lock("1")

    def sync_auth_info(self, email: bool = False) -> "Domain":
        """
        Synchronize the EPP key with the registry.

        Args:
            email: Also email the EPP key to the registrant
        """
        params = {
            "Command": "SynchAuthInfo",
            "SLD": self.sld,
            "TLD": self.tld,
            "RunSynchAutoInfo": "True",
        }
        if email:
            params["EmailEPP"] = "True"
        self._client.request(params)
        return self

    def update_nameservers(self, nameservers: Sequence[str]) -> "Domain":
        """
        Replace the domain's nameservers.

        Raises:
            InvalidNameServerCount: If fewer than 2 or more than 12 are given
        """
        nameservers = list(nameservers)
        if not MIN_NAMESERVERS <= len(nameservers) <= MAX_NAMESERVERS:
            raise InvalidNameServerCount(len(nameservers))

        ns = _nameserver_params(nameservers)
        params = {"Command": "ModifyNS", "SLD": self.sld, "TLD": self.tld}
        params.update(ns)
        self._client.request(params)

        self._nameservers.set(list(ns.values()))
        logger.info(f"Updated nameservers for {self.name}: {', '.join(nameservers)}")
        return self

    def extend(self, years: Optional[int] = None) -> "Domain":
        """Renew this domain. Returns a fresh instance."""
        return Domain.renew(self._client, self.name, years=years)
