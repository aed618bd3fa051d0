"""
Text Extractor — for bodies that are already plain text.

Google Docs and Slides exports (text/plain) and text/plain uploads need no
decoding once the normalizer has turned them into str.
"""


def passthrough_text(text: str) -> str:
    return text
