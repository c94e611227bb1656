"""
ShopDesk - Utilities Package
============================

Shared helpers for async tasks, Discord error logging and interactions.

Author: حَـــــنَّـــــا
"""
