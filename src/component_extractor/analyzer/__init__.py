"""Project reading: parsing, import resolution, exports, dependency graph."""
