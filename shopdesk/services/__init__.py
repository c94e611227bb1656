"""
ShopDesk - Services Package
===========================

Bot services. The ticket lifecycle engine lives in services.tickets.

Author: حَـــــنَّـــــا
"""
