"""HTTP surface: FastAPI app factory, routes and request/response models."""
