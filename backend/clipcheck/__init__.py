"""ClipCheck: credibility analysis of copied text with a local language model"""

__version__ = "1.0.0"
