"""
Tests for the DOM module.
"""
