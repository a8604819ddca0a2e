"""REST API: FastAPI app factory, match manager and route modules."""
