from .json_parser import load_candidates, parse_candidates

__all__ = ["load_candidates", "parse_candidates"]
