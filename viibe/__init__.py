"""
Viibe: tag safety screening and caption post-processing for the meme generator.
"""

__version__ = "1.0.0"
