"""Cross-cutting application plumbing: config, logging, errors and extensions."""
