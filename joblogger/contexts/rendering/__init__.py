"""
Rendering Context

Responsibilities:
- Renders captured job packets as self-contained HTML snapshots
- Chooses the snapshot file name (always .html)

Owns: Snapshot markup and snapshot files
Never: Sanitizes scraped description markup (done upstream by the scraper)
"""

from joblogger.contexts.rendering.snapshot import render_job_snapshot, write_job_snapshot

__all__ = ["render_job_snapshot", "write_job_snapshot"]
