"""Estetica — real-time event stream for the salon backend.

Pushes server-side domain events (bookings, services, payments...) to the
public landing page and the admin dashboard over Server-Sent Events.
"""

__version__ = "0.1.0"
