"""
Market infrastructure adapters: static reference tables and the result cache.
"""
