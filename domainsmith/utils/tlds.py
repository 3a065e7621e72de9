"""TLD normalization, validation and the builtin supported TLD table."""

import re
from typing import Optional

TLD_RE = re.compile(r'^[a-z]{2,}(?:\.[a-z]{2,})?$')

# Popular gTLDs, ccTLDs and common second-level suffixes
SUPPORTED_TLDS = (
    # Popular
    'com', 'net', 'org', 'io', 'ai', 'co', 'app', 'dev', 'me', 'tech',
    'xyz', 'info', 'biz', 'online', 'site', 'store', 'shop', 'cloud',
    # Generic
    'agency', 'art', 'blog', 'club', 'design', 'digital', 'email', 'fun',
    'group', 'guru', 'host', 'live', 'media', 'network', 'news', 'one',
    'page', 'pro', 'run', 'space', 'studio', 'systems', 'team', 'today',
    'tools', 'world', 'zone',
    # Country codes
    'ac', 'ae', 'af', 'ag', 'am', 'at', 'au', 'be', 'bz', 'ca', 'cc', 'ch',
    'cl', 'cx', 'cz', 'de', 'dk', 'es', 'eu', 'fi', 'fm', 'fr', 'gg', 'gl',
    'gs', 'hk', 'ie', 'im', 'in', 'is', 'it', 'je', 'jp', 'kr', 'la', 'li',
    'lt', 'lu', 'ly', 'ma', 'ms', 'mu', 'mx', 'ng', 'nl', 'no', 'nu', 'nz',
    'pl', 'pm', 'pt', 'pw', 're', 'ru', 'se', 'sg', 'sh', 'so', 'st', 'tc',
    'tk', 'to', 'tv', 'tw', 'uk', 'us', 'vc', 'ws', 'za',
    # Second-level
    'co.uk', 'org.uk', 'com.au', 'co.nz', 'com.ng', 'co.za', 'com.br',
)

# Named locations that do not map to their own two-letter code
LOCATION_MAP = {
    'us': 'us',
    'uk': 'co.uk',
    'ca': 'ca',
    'de': 'de',
    'fr': 'fr',
    'au': 'au',
    'in': 'in',
    'ng': 'ng',
    'usa': 'us',
    'united states': 'us',
    'united kingdom': 'co.uk',
    'england': 'co.uk',
    'canada': 'ca',
    'germany': 'de',
    'france': 'fr',
    'australia': 'au',
    'india': 'in',
    'nigeria': 'ng',
}


def normalize_tld(tld: str) -> str:
    return tld.strip().lstrip('.').lower()


def is_valid_tld(tld: str) -> bool:
    return bool(TLD_RE.match(normalize_tld(tld)))


def get_cc_tld(location: Optional[str]) -> Optional[str]:
    """Resolve a location (two-letter code or known name) to a ccTLD."""
    if not location:
        return None
    lower = location.strip().lower()
    if re.match(r'^[a-z]{2}$', lower):
        return LOCATION_MAP.get(lower, lower)
    return LOCATION_MAP.get(lower)
