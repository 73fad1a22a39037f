"""auth/ -- Authentication and authorization package for DevConnector.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/, profiles/, or posts/.
api/ imports from auth/, not the other way around.
"""
