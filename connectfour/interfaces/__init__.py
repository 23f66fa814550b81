"""
connectfour.interfaces - User interfaces for Connect Four

Presentation layers that drive a GameSession and subscribe to its state
changes.
"""

# Don't import anything here to avoid circular imports
__all__ = []
