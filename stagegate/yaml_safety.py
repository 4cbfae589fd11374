"""YAML loading for stagegate.yaml overrides.

The override file lives in the repository (or .git/hooks) and is read on
every commit, so alias expansion is capped: a few hundred bytes of nested
anchors must not be able to balloon into gigabytes before the hook runs.
"""

from __future__ import annotations

import yaml

MAX_ALIASES = 100


class _AliasLimitedLoader(yaml.SafeLoader):
    """SafeLoader that counts alias references while composing the document."""

    def compose_node(self, parent, index):
        if self.check_event(yaml.AliasEvent):
            self._alias_count = getattr(self, "_alias_count", 0) + 1
            if self._alias_count > MAX_ALIASES:
                raise yaml.YAMLError(f"YAML alias limit exceeded (max {MAX_ALIASES})")
        return super().compose_node(parent, index)


def safe_yaml_load(stream):
    """Parse an override document like yaml.safe_load, with the alias cap."""
    return yaml.load(stream, Loader=_AliasLimitedLoader)
