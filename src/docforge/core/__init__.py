"""
Core Package

Template models, draw primitives, validation and error types shared by
the layout engine, the plugins and the generator.
"""
