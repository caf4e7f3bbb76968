# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""quizpath backend.

Quiz grading and result publishing, event-driven preference profiles
and course recommendations.
"""

__version__ = "1.0.0"
