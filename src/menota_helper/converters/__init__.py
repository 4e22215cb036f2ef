"""
Conversion between document text and the element tree.
"""

from .xml_bridge import XMLBridge

__all__ = ["XMLBridge"]
