"""
StyleAI backend: outfit suggestions, clothing detection and product search.
"""
