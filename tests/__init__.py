# =============================================================================
# tests/ - ModelHub Test Suite
# =============================================================================
# Services run against the in-memory repositories in fakes.py; the HTTP
# tests drive create_app() through FastAPI's TestClient.
#
# Run tests with: pytest
# =============================================================================
