"""
Device ports module.

Simple synchronous stand-ins for the card reader, deposit slot, screen and
receipt printer. The session machine drives them; they hold no session logic.
"""
