"""
Capture Context

Responsibilities:
- Talks to the native host from the caller side (spawn, send, timeout)
- Persists the caller's settings (base folder, theme)
- Turns scraped job fields into CreateJobPacket requests

Owns: Everything the browser extension does before and after a host call
Never: Writes job folders itself
"""
