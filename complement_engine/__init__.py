"""
complement_engine

Word completion for a text editor: indexes words from the current document,
user dictionaries and linkable document titles, and suggests completions for
the phrase before the cursor.
"""

__version__ = "0.1.0"
