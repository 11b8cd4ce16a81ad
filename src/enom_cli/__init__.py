"""
Enom CLI

Command-line interface for Enom domain operations.
"""
