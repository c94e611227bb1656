"""
ShopDesk
========

Discord ticket desk for a shop: purchase and support tickets with
HTML transcripts.

Author: حَـــــنَّـــــا
"""

__version__ = "1.0.0"
