"""
Command-line tools for the prompt exporter.
"""
