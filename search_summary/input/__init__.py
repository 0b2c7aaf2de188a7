"""Input parsers for host-supplied search matches."""

from .posts import clean_content, load_request, parse_posts_json, prepare_posts

__all__ = ["clean_content", "load_request", "parse_posts_json", "prepare_posts"]
