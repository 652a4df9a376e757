"""
Foundation layer: parsing, IR models, semantic passes and generators.
"""
