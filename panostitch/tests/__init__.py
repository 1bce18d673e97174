"""
Test suite for the `panostitch` package.

This package contains unit and integration tests for:

- `limiter` and `fetcher`: token bucket admission, cancellation and HTTP
  failure handling against mocked aiohttp sessions.
- `planner` and `downloader`: grid addressing, fetch order and abort on the
  first failed tile.
- `compositor` and `imaging`: tile placement, trimming and encoding, both
  with Pillow and with an in-memory fake backend.
- `core`: the end-to-end pipeline writing panoramas to `tmp_path`.

Usage:

    # Run all tests in the package
    pytest panostitch/tests

    # Run a specific test file
    pytest panostitch/tests/test_core.py
"""
