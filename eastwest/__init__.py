"""
East @ West restaurant site.

Responsibilities:
- Serve the marketing pages, sitemaps and reservation API.
- Apply per-path cache policies and negotiated compression to responses.
- Refresh staff sessions and guard the protected routes.
- Ship critical CSS inline and defer the full stylesheet.
"""
