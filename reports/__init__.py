"""Report CLI (cbi-report)."""
