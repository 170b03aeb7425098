"""Pure text transforms: no filesystem access, no third-party tools."""
