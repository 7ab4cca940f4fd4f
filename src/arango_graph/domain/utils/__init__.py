from .url_helpers import bool_string, build_url, encode_params

__all__ = ["bool_string", "build_url", "encode_params"]
