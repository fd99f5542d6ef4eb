"""Dashboard authentication.

Learn: The dashboard logs in through the main salon API, which sets a
signed JWT in the session cookie. This package only verifies that token
so the auth event stream can be restricted to staff.
"""
