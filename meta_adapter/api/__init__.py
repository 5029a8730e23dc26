"""
Meta-adapter API: discovery, execution and the HTTP surface.
"""
