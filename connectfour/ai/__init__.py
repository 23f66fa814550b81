"""
connectfour/ai/__init__.py - Search opponent for Connect Four
"""

from connectfour.ai.minimax import SearchEngine, SearchResult

__all__ = ['SearchEngine', 'SearchResult']
