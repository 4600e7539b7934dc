"""
Tests for the commands module.
"""
