"""
Voice Cart: a bilingual (English/Hindi) voice shopping list.

Importing the package does not start the web app; use voice_cart.main:app.
"""

__version__ = "1.0.0"
