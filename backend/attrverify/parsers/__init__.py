"""
Parsers for structured attribute values.

Provides the list, chunk, dependency and path parsing that validators
delegate to.
"""

from .depend import DEPEND_LEN, parse_depend_list
from .lists import parse_at_list, parse_stage_list
from .names import MAX_JOB_NAME, NameCheck, RangeCheck, check_job_array_range, check_job_name
from .paths import MAXPATHLEN, prepare_path
from .select_spec import Chunk, parse_chunk, split_plus_spec

__all__ = [
    "DEPEND_LEN",
    "parse_depend_list",
    "parse_at_list",
    "parse_stage_list",
    "MAX_JOB_NAME",
    "NameCheck",
    "RangeCheck",
    "check_job_array_range",
    "check_job_name",
    "MAXPATHLEN",
    "prepare_path",
    "Chunk",
    "parse_chunk",
    "split_plus_spec",
]
