"""Presentation of dependency graphs: text listings, Mermaid and HTML."""
