"""Dictionary representations of object graphs."""

from .capabilities import capabilities_of as capabilities_of
from .capabilities import supports as supports
from .classifier import classify_annotation as classify_annotation
from .classifier import classify_for_decode as classify_for_decode
from .classifier import classify_for_encode as classify_for_encode
from .coding import Coding as Coding
from .coding import from_dictionary as from_dictionary
from .coding import to_dictionary as to_dictionary
from .encoding import decode_value as decode_value
from .encoding import encode_value as encode_value
from .encoding import object_from_dictionary as object_from_dictionary
from .errors import *
from .fields import coding_field as coding_field
from .fields import descriptor_for as descriptor_for
from .fields import field_descriptors as field_descriptors
from .registry import ClassRegistry as ClassRegistry
from .registry import register_structure as register_structure
from .registry import registry as registry
from .structures import format_structure as format_structure
from .structures import parse_structure as parse_structure
from .types import *
