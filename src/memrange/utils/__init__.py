"""
memrange utilities package
"""
