"""Reference problems and assertion helpers for tests."""
