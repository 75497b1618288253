"""Constants for the Stockroom integration.

Defines the integration domain and the public integration version.
"""

# Integration domain used across all modules
DOMAIN: str = "stockroom"

# Public integration version (kept in sync with manifest.json)
INTEGRATION_VERSION: str = "0.1.0"
