"""
Client-side engine: versioned view cache, HTTP backend and mutation coordinator.
"""
