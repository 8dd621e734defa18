"""
Inkpress - annotate PDF pages and flatten the annotations into the page imagery.
"""

__version__ = "0.3.0"
