"""
Public suffix parsing.

Splits fully-qualified domain names into second-level and top-level parts.
"""

from typing import Optional, Tuple

import tldextract

from enom_client.exceptions import InvalidDomainName

_extractor: Optional[tldextract.TLDExtract] = None


def _get_extractor() -> tldextract.TLDExtract:
    """Return the shared extractor, backed by the bundled suffix list snapshot."""
    global _extractor
    if _extractor is None:
        _extractor = tldextract.TLDExtract(
            suffix_list_urls=(),
            cache_dir=None,
            include_psl_private_domains=False,
        )
    return _extractor


def parse_sld_and_tld(domain_name: str) -> Tuple[str, str]:
    """
    Split a domain name into (sld, tld).

    Subdomain labels are discarded, so "www.example.co.uk" yields
    ("example", "co.uk").

    Only the ICANN section of the public suffix list is used. Private
    suffixes such as github.io or blogspot.com are not treated as TLDs,
    so "example.github.io" yields ("github", "io"). The joined sld and tld therefore equal the
    input only when it has no labels below the registrable domain.

    Raises:
        InvalidDomainName: If no registrable domain can be found
    """
    extracted = _get_extractor()(domain_name.strip().rstrip("."))
    if not extracted.domain or not extracted.suffix:
        raise InvalidDomainName(domain_name)
    return extracted.domain, extracted.suffix
