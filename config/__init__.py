"""
Django project configuration for the store directory.
"""
