"""Panda Mart Notify.

Multi-channel notification dispatch for the Panda Mart Kenya storefront:
email, SMS, push and in-app delivery behind one channel-agnostic call.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
