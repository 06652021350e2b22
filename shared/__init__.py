"""
Shared Kernel

Domain building blocks (entities, value objects, domain events, the
TimeInterval value object) and the application plumbing around them:
unit of work and message bus. Nothing here knows about bookings or spaces.
"""
