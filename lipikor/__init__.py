"""
Lipikor Export Core
===================

Deterministic export of captured rich text to DOCX.
Converts a structured document (paragraphs, headings, list items and
tables, in Latin, Bengali and Arabic script) into a Word document.

Main components:
- Document model
- Unit and size-token parsing
- Script segmentation of mixed-script text
- Font resolution per target application (Word / Google Docs)
- Style assembly and table layout
- DOCX packaging
"""

__version__ = "1.0.0"
__author__ = "Smart Lipikor Team"
