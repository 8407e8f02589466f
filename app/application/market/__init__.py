"""
Market application layer.

Hosts the query facade (cache-fronted entry point to the engines) and
the use cases built on top of it.
"""
