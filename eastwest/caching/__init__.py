"""
Response caching and compression.

Responsibilities:
- Map request paths to cache policies through an ordered rule table.
- Build the cache header set for a path.
- Negotiate brotli/gzip from ``Accept-Encoding`` and encode bodies.
"""
