"""
Host model - the minimal element/document/frame-clock surface the runtime
drives. A browser embedding implements the same shapes; tests use these
classes directly.
"""
