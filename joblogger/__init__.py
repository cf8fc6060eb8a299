"""
JobLogger - capture job postings from the browser into local job folders.

A browser extension scrapes a job-detail view and sends it to a locally
installed native messaging host, which files it on disk as a dated folder
with a self-contained HTML snapshot.

Architecture:
- Messaging Context: Framing, envelope parsing, dispatch and the host process loop
- Filing Context: Folder naming, collision-free allocation, opening folders
- Rendering Context: HTML snapshot generation
- Capture Context: Caller side (host client, settings store, request building)
"""

__version__ = "0.1.0"
