"""Device-local storage implementations"""
