"""
Shared service utilities.

- http.py  - requests session with retry, timeout and gzip (used by datasources)
"""
