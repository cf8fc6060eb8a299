"""
Messaging Context

Responsibilities:
- Reads and writes length-prefixed messages on the host's stdin/stdout
- Parses request envelopes into typed requests
- Dispatches requests to handlers and converts failures into error responses
- Runs the sequential read-dispatch-write loop

Owns: Wire protocol, request/response schema, process loop
Never: Touches the filesystem directly (delegates to filing and rendering)
"""
