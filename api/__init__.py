"""
HTTP surface of the prompt exporter.
"""
