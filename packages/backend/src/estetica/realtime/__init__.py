"""Real-time infrastructure — Server-Sent Events fan-out.

Learn: Events flow one way, server → browser:
1. Services call EventHub.broadcast() after a state change
2. The hub writes one frame per matching subscriber into its sink
3. Each subscriber's streaming response drains its sink to the socket

Two audiences subscribe: public landing-page visitors and authenticated
dashboard users. There is no replay: a client that connects late simply
re-fetches over the REST API.
"""

from estetica.realtime.hub import EventHub

__all__ = ["EventHub"]
