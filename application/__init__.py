"""
Application Layer for the LiftLog API.

This package contains:
- ports/: Abstract repository interfaces (what the domain needs)
- exceptions.py: Errors shared by services, repositories and routers
"""
