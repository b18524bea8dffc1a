"""Beacon spec presets and timing settings.

Note: The 'types' module must be imported after calling constants.set_preset()
to ensure SSZ types have correct sizes for the chosen preset.
"""

from . import constants
from .network_config import ActiveSpec, SpecSettings, load_spec_settings, resolve_spec_settings

__all__ = ["constants", "ActiveSpec", "SpecSettings", "load_spec_settings", "resolve_spec_settings"]
