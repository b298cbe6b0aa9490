"""Notifier adapters.

- StubNotifier: logs notifications (development/testing)
"""

from authcycle.infrastructure.email.stub_notifier import StubNotifier

__all__ = ["StubNotifier"]
