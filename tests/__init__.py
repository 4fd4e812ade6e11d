"""
Tests for profile_keeper.
"""
