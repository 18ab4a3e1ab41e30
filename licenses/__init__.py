"""
Licenses module - product licenses held by clients.

This module handles:
- License entity (one-time or monthly subscription)
- Status changes and the expiration sweep
- Joined license views with client, product and price
"""
