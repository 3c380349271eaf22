"""Report artifacts: console output, Excel workbook and Word document."""
