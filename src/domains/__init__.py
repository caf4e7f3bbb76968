# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer.

This package contains domain services that encapsulate business logic.
Each domain module provides services that orchestrate operations
across repositories and external collaborators.

Domains:
    quiz: Quiz authoring, grading, result storage and publishing.
    preferences: Preference profiles and the event aggregator.
    recommendation: Course ranking from a profile and a catalog snapshot.
"""
