from .auto_tag import auto_tag_link

__all__ = [
    "auto_tag_link",
]
