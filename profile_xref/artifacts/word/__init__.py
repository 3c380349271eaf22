"""Word report generation."""
