"""
StreamGuide Test Suite

Test Categories:
- unit/: Fast, isolated unit tests of the scheduling core, store and clients
- integration/: API tests through the FastAPI test client
- fixtures/: Shared test data and mocks
"""
