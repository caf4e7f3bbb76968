# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic schemas shared by the API, domain services and workers.

Modules:
    quiz: Quiz definitions, submissions and graded results.
    preference: Per-user preference profiles.
    recommendation: Catalog candidates and ranked recommendations.
    events: Versioned event payloads and their decoder.
"""
