"""Logging package"""
