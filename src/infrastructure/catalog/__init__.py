# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Client for the external course catalog."""

from src.infrastructure.catalog.client import (
    CatalogClient,
    CatalogError,
    CatalogUnavailableError,
)

__all__ = [
    "CatalogClient",
    "CatalogError",
    "CatalogUnavailableError",
]
