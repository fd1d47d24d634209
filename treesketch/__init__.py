"""
TreeSketch - the puzzle board, HTTP service and CLI around the treecheck validators.
"""

__version__ = "1.0.0"
