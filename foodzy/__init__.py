"""
                FoodZy

Restaurant ordering service: menu, cart, checkout, live order tracking,
chat assistant, multi-language strings and an admin back-office, backed
by a hosted data platform with a local stand-in for development.
"""

__version__ = "1.0.0"
