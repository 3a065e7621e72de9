"""Client configuration and YAML loading."""

import inspect
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set

import yaml

from .checkers import AvailabilityService
from .ranking import RankingConfig
from .scoring import ScoringConfig
from .utils.tlds import SUPPORTED_TLDS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"

# more here - https://gist.github.com/marcanuy/06cb00bc36033cd12875
DEFAULT_PREFIXES = [
    'my', 'the', 'get', 'try', 'go', 'global', 'one', 'pro', 'best',
    'hey', 'on', 'up', 'we', 'our', 'new', 'now', 'top', 'ez',
    'you', 'max', 'neo', 're', 'be', 'do', 'co', 'hub', 'i', 'u',
    'easy', 'fast', 'free', 'just', 'true', 'next', 'real', 'pure', 'good'
]

DEFAULT_SUFFIXES = [
    'ly', 'ify', 'hq', 'hub', 'app', 'web', 'spot', 'inc', 'site',
    'io', 'ai', 'up', 'it', 'go', 'co', 'fy', 'me', 'now', 'lab',
    'dev', 'tech', 'net', 'one', 'pay', 'kit', 'bot', 'base', 'box'
]

DEFAULT_TLD_WEIGHTS = {
    'com': 20,
    'net': 10,
    'org': 10,
    'io': 10,
    'dev': 10,
    'me': 5,
    'ng': 10,
}


def _nested_sections() -> Dict[str, Set[str]]:
    """Options accepted under each nested config section."""
    service_params = inspect.signature(AvailabilityService.__init__).parameters
    return {
        'scoring': {f.name for f in fields(ScoringConfig)},
        'ranking': {f.name for f in fields(RankingConfig)},
        'availability': set(service_params) - {'self', 'dns_checker', 'whois_checker'},
    }


def _section_options(section: str, value: Any, known: Set[str]) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        logger.warning(f"Ignoring config section {section}: expected a mapping")
        return {}
    options = {}
    for key, item in value.items():
        if key not in known:
            logger.warning(f"Ignoring unknown {section} option: {key}")
            continue
        options[key] = item
    return options

@dataclass
class ClientConfig:
    """Defaults applied to every search; each search may override them."""
    default_tlds: List[str] = field(default_factory=lambda: ['com', 'ng'])
    supported_tlds: List[str] = field(default_factory=lambda: list(SUPPORTED_TLDS))
    limit: int = 20
    offset: int = 0
    prefixes: List[str] = field(default_factory=lambda: list(DEFAULT_PREFIXES))
    suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_SUFFIXES))
    max_synonyms: int = 5
    tld_weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_TLD_WEIGHTS))
    include_hyphenated: bool = False
    check_availability: bool = False
    ai_timeout: float = 5.0
    # Overrides for ScoringConfig / RankingConfig / AvailabilityService
    scoring: Dict[str, Any] = field(default_factory=dict)
    ranking: Dict[str, Any] = field(default_factory=dict)
    availability: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None) -> "ClientConfig":
        """Build a config from a (YAML) mapping, ignoring unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        nested = _nested_sections()
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown config option: {key}")
                continue
            if value is None:
                continue
            if key in nested:
                value = _section_options(key, value, nested[key])
            values[key] = value
        return cls(**values)

    def merged(self, **overrides) -> "ClientConfig":
        """Copy with non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """Load configuration from YAML file."""
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            return yaml.safe_load(f) or {}
    return {}
