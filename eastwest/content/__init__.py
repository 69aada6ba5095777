"""
Static site content.

Responsibilities:
- Register the public pages with their titles and sitemap hints.
- Hold the sample blog posts and menu highlights.
"""
