# listings_processor/examples/__init__.py
"""Runnable examples for the listings cleaning pipeline"""
