"""REST routers mounted under /api."""
