"""
AI CMI Statement Extractor - Turn CMI settlement statements into accounting journal rows

This tool uses Claude AI to read the terminal groups of a CMI statement (PDF or image),
builds the four journal rows of every group and exports them to an XLSX or ODS workbook.
"""

from cmi_extractor.cli import main

if __name__ == "__main__":
    main()
