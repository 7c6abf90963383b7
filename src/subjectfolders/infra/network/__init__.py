from __future__ import annotations

"""
Network Communication Infrastructure.

Facade over the outbound notification clients.
"""

from subjectfolders.infra.network.notify_client import broadcast_console, post_webhook

__all__ = [
    "broadcast_console",
    "post_webhook",
]
