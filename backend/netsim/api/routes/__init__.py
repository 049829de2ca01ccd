"""
Routes Module

Contains API route definitions.
"""

from . import networks, sessions

__all__ = ['networks', 'sessions']
