"""Bookings app package.

This app is the booking/availability engine: it decides whether a
requested interval of a space is free, reserves it atomically and
answers which spaces are occupied in a window. Overlap is enforced by
database transactions with a per-space row lock and, on PostgreSQL, an
exclusion constraint.
"""
