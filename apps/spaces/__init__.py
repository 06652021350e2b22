"""Spaces app package.

Floors and the bookable spaces drawn on them. The booking engine only
reads from this app: it needs to know whether a space exists and whether
it is currently open for bookings.
"""
