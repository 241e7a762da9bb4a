"""HTTP surface: aiohttp server, middleware and routes."""
