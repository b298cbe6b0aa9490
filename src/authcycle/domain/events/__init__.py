"""Domain events package."""

from authcycle.domain.events.security_event import RequestContext, SecurityEvent

__all__ = ["RequestContext", "SecurityEvent"]
