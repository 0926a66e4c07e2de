"""Test package for PDF Chat.

Structure:
    - unit/: Individual function and class tests
    - integration/: API and end-to-end chat tests over ASGITransport

PDFs are generated in memory with pypdf. Leverages pytest with pytest-check
for soft assertions.
"""
