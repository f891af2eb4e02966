"""
Domain Services - Pure Business Logic
====================================
Indicator math and caching primitives without network dependencies.
"""
