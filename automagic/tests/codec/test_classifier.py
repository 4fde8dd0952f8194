"""Tests for field type classification."""

# pylint: disable=redefined-outer-name,unused-variable,expression-not-assigned,singleton-comparison

from collections import OrderedDict, deque
from collections.abc import Mapping, MutableSequence, Sequence
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Optional

from automagic.codec.classifier import (
    classify_annotation,
    classify_for_decode,
    classify_for_encode,
    is_coding_class,
)
from automagic.codec.encoding import encode_value
from automagic.codec.types import FieldType
from automagic.tests.models import Address, Bag, Circle, FrozenBag, Ledger, Point, Shape


def describe_classify_for_encode():
    def classifies_scalars(expect):
        for value in ("text", 5, 2.5, True, b"\x00", bytearray(b"x"), date(2020, 1, 1), None):
            expect(classify_for_encode(value)) == FieldType.SCALAR
        expect(classify_for_encode(datetime(2020, 1, 1, 12))) == FieldType.SCALAR

    def classifies_codec_objects(expect):
        expect(classify_for_encode(Address())) == FieldType.CUSTOM_OBJECT
        expect(classify_for_encode(Shape("plain"))) == FieldType.CUSTOM_OBJECT

    def classifies_structures(expect):
        expect(classify_for_encode(Point(1, 2))) == FieldType.STRUCTURE

    def classifies_keyed_collections(expect):
        expect(classify_for_encode({})) == FieldType.COLLECTION_HASH_MUTABLE
        expect(classify_for_encode(OrderedDict())) == FieldType.COLLECTION_HASH_MUTABLE
        expect(classify_for_encode(Ledger())) == FieldType.COLLECTION_HASH_MUTABLE
        expect(classify_for_encode(MappingProxyType({}))) == FieldType.COLLECTION_HASH

    def classifies_ordered_collections(expect):
        expect(classify_for_encode([])) == FieldType.COLLECTION_ARRAY_MUTABLE
        expect(classify_for_encode(deque())) == FieldType.COLLECTION_ARRAY_MUTABLE
        expect(classify_for_encode(Bag())) == FieldType.COLLECTION_ARRAY_MUTABLE
        expect(classify_for_encode(())) == FieldType.COLLECTION_ARRAY
        expect(classify_for_encode(FrozenBag())) == FieldType.COLLECTION_ARRAY

    def falls_back_to_scalar(expect):
        expect(classify_for_encode(object())) == FieldType.SCALAR
        expect(classify_for_encode({1, 2})) == FieldType.SCALAR


def describe_classify_for_decode():
    def classifies_dict_with_class_key_as_custom_object(expect):
        expect(classify_for_decode({"class": "Address"})) == FieldType.CUSTOM_OBJECT

    def classifies_plain_dicts_as_hashes(expect):
        expect(classify_for_decode({"a": 1})) == FieldType.COLLECTION_HASH_MUTABLE
        expect(classify_for_decode({})) == FieldType.COLLECTION_HASH_MUTABLE
        expect(classify_for_decode(MappingProxyType({}))) == FieldType.COLLECTION_HASH

    def classifies_arrays(expect):
        expect(classify_for_decode([])) == FieldType.COLLECTION_ARRAY_MUTABLE
        expect(classify_for_decode([{"class": "Address"}])) == FieldType.COLLECTION_ARRAY_MUTABLE
        expect(classify_for_decode(())) == FieldType.COLLECTION_ARRAY

    def classifies_structure_strings(expect):
        expect(classify_for_decode("@Point{1, 2}")) == FieldType.STRUCTURE

    def classifies_other_values_as_scalars(expect):
        for value in ("text", "@handle", 3, 1.5, False, b"@Point{1, 2}", None):
            expect(classify_for_decode(value)) == FieldType.SCALAR

    def reclassifies_every_encoded_category(expect):
        samples = {
            FieldType.SCALAR: "Ann",
            FieldType.CUSTOM_OBJECT: Address("Elm", 5),
            FieldType.STRUCTURE: Point(1, 2),
            FieldType.COLLECTION_HASH: MappingProxyType({"a": 1}),
            FieldType.COLLECTION_HASH_MUTABLE: {"a": 1},
            FieldType.COLLECTION_ARRAY: ("a",),
            FieldType.COLLECTION_ARRAY_MUTABLE: ["a"],
        }
        for field_type, value in samples.items():
            expect(classify_for_decode(encode_value(value, field_type))) == field_type

    def reclassifies_immutable_hashes_read_back_as_plain_dicts(expect):
        encoded = encode_value(MappingProxyType({"a": 1}), FieldType.COLLECTION_HASH)
        expect(classify_for_decode(dict(encoded))) == FieldType.COLLECTION_HASH_MUTABLE


def describe_classify_annotation():
    def classifies_scalar_annotations(expect):
        expect(classify_annotation(str)) == (FieldType.SCALAR, None, None)
        expect(classify_annotation(datetime)) == (FieldType.SCALAR, None, None)
        expect(classify_annotation(Optional[int])) == (FieldType.SCALAR, None, None)

    def classifies_codec_classes(expect):
        expect(classify_annotation(Address)) == (FieldType.CUSTOM_OBJECT, Address, None)
        expect(classify_annotation(Address | None)) == (FieldType.CUSTOM_OBJECT, Address, None)

    def classifies_disabled_bases_as_custom_objects(expect):
        expect(classify_annotation(Shape)) == (FieldType.CUSTOM_OBJECT, Shape, None)

    def classifies_structures(expect):
        expect(classify_annotation(Point)) == (FieldType.STRUCTURE, Point, None)

    def classifies_concrete_collections(expect):
        expect(classify_annotation(list[int])) == (FieldType.COLLECTION_ARRAY_MUTABLE, None, list)
        expect(classify_annotation(tuple[int, ...])) == (FieldType.COLLECTION_ARRAY, None, tuple)
        expect(classify_annotation(dict[str, int])) == (
            FieldType.COLLECTION_HASH_MUTABLE,
            None,
            dict,
        )
        expect(classify_annotation(Bag)) == (FieldType.COLLECTION_ARRAY_MUTABLE, None, Bag)

    def picks_defaults_for_abstract_collections(expect):
        expect(classify_annotation(Mapping[str, Any])) == (
            FieldType.COLLECTION_HASH,
            None,
            MappingProxyType,
        )
        expect(classify_annotation(Sequence[int])) == (FieldType.COLLECTION_ARRAY, None, tuple)
        expect(classify_annotation(MutableSequence[int])) == (
            FieldType.COLLECTION_ARRAY_MUTABLE,
            None,
            list,
        )

    def leaves_dynamic_annotations_open(expect):
        expect(classify_annotation(Any)) == (None, None, None)
        expect(classify_annotation(object)) == (None, None, None)
        expect(classify_annotation(int | str)) == (None, None, None)


def describe_is_coding_class():
    def requires_enabled_class(expect):
        expect(is_coding_class(Circle)) == True
        expect(is_coding_class(Shape)) == False
        expect(is_coding_class(Shape, enabled_only=False)) == True
        expect(is_coding_class(dict)) == False
