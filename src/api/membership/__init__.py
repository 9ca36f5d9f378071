"""Membership bounded context.

Channels, groups nested in channels, the users who belong to them, and the
join request workflows through which users become members.
"""
