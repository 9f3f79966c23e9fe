"""Content loading, markdown conversion and page templates."""
