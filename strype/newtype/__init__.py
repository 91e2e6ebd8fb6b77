from .spec import InnerKind, TypeSpec, normalize_checks
from .storage import Box, Ref, text_of
from .generator import StringType, define, define_string_type
from .cast import box_to_boxed, boxed_to_box, ref_to_view, transpose, view_to_ref

__all__ = [
    "InnerKind",
    "TypeSpec",
    "normalize_checks",
    "Box",
    "Ref",
    "text_of",
    "StringType",
    "define",
    "define_string_type",
    "box_to_boxed",
    "boxed_to_box",
    "ref_to_view",
    "transpose",
    "view_to_ref",
]
