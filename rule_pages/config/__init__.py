"""Load and validate rules configuration YAML for rule_pages builds.

This subpackage parses the project's ``rules.yaml`` file, applies defaults for
every missing option, and produces a :class:`RulesConfig` dataclass that the
content loader, link resolver, and CLI consume. The primary entry point is
:func:`load_rules_config`.

Examples
--------
>>> from rule_pages.config import RulesConfig
>>> RulesConfig().cross_reference_base
'/rules'
>>> RulesConfig(base_url="/docs/").main_permalink
'/docs/rules/main'
"""

from .loader import build_rules_config, load_rules_config
from .models import RulesConfig, RulesConfigError, join_permalink

__all__ = [
    "RulesConfig",
    "RulesConfigError",
    "build_rules_config",
    "join_permalink",
    "load_rules_config",
]
