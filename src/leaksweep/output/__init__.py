"""Report writers — JSON, CSV, terminal."""
