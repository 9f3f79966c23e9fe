"""Postserve - markdown posts served over HTTP."""
