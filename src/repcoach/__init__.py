"""
Virtual Rep Coach: rep counting and form scoring from 2D pose keypoints.
"""

from .trainer import VirtualRepTrainer

__version__ = "0.1.0"

__all__ = ['VirtualRepTrainer']
