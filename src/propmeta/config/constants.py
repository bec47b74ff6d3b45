"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
For configurable values, see models.py.
"""

# =============================================================================
# Archive Metadata Entries
# =============================================================================
# Read in this order inside every archive. Both are optional per archive.

PRIMARY_METADATA_ENTRY = "META-INF/spring-configuration-metadata.json"
"""Metadata generated by the configuration processor."""

ADDITIONAL_METADATA_ENTRY = "META-INF/additional-spring-configuration-metadata.json"
"""Hand-written supplementary metadata."""

METADATA_ENTRY_NAMES: tuple[str, ...] = (PRIMARY_METADATA_ENTRY, ADDITIONAL_METADATA_ENTRY)

# =============================================================================
# Workspace Layout
# =============================================================================

DEFAULT_CLASSPATH_FILE = "classpath.txt"
"""Path-list file, relative to the workspace root."""

CONFIG_DIR_NAME = ".propmeta"
"""Per-workspace configuration directory."""

# =============================================================================
# Properties File Syntax
# =============================================================================

KEY_VALUE_DELIMITERS = ("=", ":")
"""Characters separating a property key from its value."""
