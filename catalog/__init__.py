"""Library Catalog - Core Package

This package contains the catalog modules:
- Book model (book.py)
- Identifier validation (validators.py)
- Inventory store (library.py)
- Disk persistence (storage.py)
- CLI output helpers (ui_helpers.py)
"""
