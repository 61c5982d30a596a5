"""HTTP API package. Import routers from their modules."""
