"""
Filing Context

Responsibilities:
- Builds and sanitizes job folder names
- Allocates collision-free job folders under a base directory
- Opens folders in the system file browser

Owns: Job folder layout on disk
Never: Decides what goes inside a job folder
"""
