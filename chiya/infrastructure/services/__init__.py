"""External service adapters"""
