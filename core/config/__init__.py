"""Configuration package for the grid server.

- grid: grid size bounds and startup defaults
- server: HTTP/WebSocket server defaults
"""
