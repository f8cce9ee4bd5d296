"""Command line interface for pm"""
