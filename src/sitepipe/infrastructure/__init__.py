"""Filesystem, project paths and the dev server."""
