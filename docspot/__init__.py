"""
DocSpot

A FastAPI-based doctor appointment booking service: patients book
appointments with approved doctors, doctors manage their profile and incoming
requests, and admins review doctor applications.
"""

__version__ = "1.0.0"
