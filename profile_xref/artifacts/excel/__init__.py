"""Excel report generation."""
