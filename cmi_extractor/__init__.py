"""
AI CMI Statement Extractor - Turn CMI settlement statements into accounting journal rows

This package provides functionality to:
- Extract transaction groups from statement PDFs and images using Claude AI
- Apply the four-row journal rule to every terminal group
- Show the rows in the terminal or in a browser page
- Export the rows to XLSX or ODS spreadsheets
"""
